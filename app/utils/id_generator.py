"""
Utility functions for generating consistent ID formats for various entities.
"""

import os
import uuid


def generate_apartment_code(apartment_id: int) -> str:
    """
    Generate a formatted apartment code in the format APT-XXXX.

    Args:
        apartment_id (int): The numeric ID of the apartment

    Returns:
        str: A formatted apartment code (e.g., APT-0001)
    """
    return f"APT-{apartment_id:04d}"


def generate_tenant_code(tenant_id: int) -> str:
    """
    Generate a formatted tenant code in the format TEN-XXXX.

    Args:
        tenant_id (int): The numeric ID of the tenant

    Returns:
        str: A formatted tenant code (e.g., TEN-0001)
    """
    return f"TEN-{tenant_id:04d}"


def generate_upload_name(filename: str) -> str:
    """
    Generate a collision-free file name that keeps the original name readable.

    Returns:
        str: '<uuid4>_<basename>' (e.g., '3f2b..._lease.pdf')
    """
    basename = os.path.basename(filename or "upload")
    return f"{uuid.uuid4()}_{basename}"
