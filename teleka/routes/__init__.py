# teleka/routes/__init__.py
from teleka.routes.accounts import create_accounts_blueprint
from teleka.routes.places import create_places_blueprint

__all__ = ["create_accounts_blueprint", "create_places_blueprint"]
