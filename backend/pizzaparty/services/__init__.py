"""Services module.

This module provides the service layer architecture:
- exceptions: Custom service exceptions
- orders: Order code generation, lifecycle rules and coordination
"""
