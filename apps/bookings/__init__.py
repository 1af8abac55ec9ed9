"""Bookings app package.

This app encapsulates the booking lifecycle: availability checks over
inclusive date ranges, the atomic equipment hold, payment session
creation, payment confirmation and the periodic reconciliation of
payment sessions that never reported back.
"""
