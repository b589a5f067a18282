"""Framework adapters for proposalkit.

These are optional thin wrappers.  Import the adapter for your framework::

    from proposalkit.adapters.fastapi_adapter import create_composer_router
"""
