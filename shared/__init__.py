"""
Shared Kernel

Value objects, model fields and API plumbing shared by all domain apps.
"""
