# ==============================================================================
# WSGI Entry Point - for Gunicorn in production
# ==============================================================================
# Entry point for WSGI servers such as Gunicorn.
#
# USAGE:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# PROJECT LAYOUT:
#   repo_root/           <- working directory (on sys.path automatically)
#   ├── wsgi.py          <- this file
#   ├── pyproject.toml
#   └── storefront/      <- Python package
#       ├── __init__.py
#       ├── main.py
#       ├── services/
#       └── repositories/
#
# Absolute imports work WITHOUT touching sys.path:
#   from storefront.main import app  ✓
#   from storefront.services import CatalogService  ✓
# ==============================================================================

from storefront.main import app

# ==============================================================================
# ENTRY POINT
# ==============================================================================
# 'app' is exported for Gunicorn:
#   gunicorn wsgi:app
#
# Local development:
#   python wsgi.py
# ==============================================================================

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
