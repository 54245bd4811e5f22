# pwv_gateway/core/__init__.py
