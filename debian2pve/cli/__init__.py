# debian2pve/cli/__init__.py
