"""
ClaidCut background removal service package.

Exposes the data-URI encoder, the Eden AI gateway, and the FastAPI
application that forwards uploaded images to the provider.
"""
