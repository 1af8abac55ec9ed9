"""Payments app: gateway adapter, receipts and webhook audit log."""
