# debian2pve/config/__init__.py
