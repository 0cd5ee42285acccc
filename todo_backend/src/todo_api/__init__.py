"""
Todo service package.

Build the ASGI application with ``todo_api.main.create_app``; run it with
``python -m todo_api`` or ``uvicorn --factory todo_api.main:create_app``.
"""
