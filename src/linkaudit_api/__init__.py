"""HTTP interface for the internal link auditor.

Run with::

    uvicorn linkaudit_api.app:app --reload
"""
