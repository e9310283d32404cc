# app/api/v1/dependencies.py
"""
Dépendances générales de l'API v1.

Ce module contient les utilitaires partagés par tous les modules :
- PaginationParams : Paramètres de pagination standardisés
- page_count : Nombre de pages d'un résultat paginé

Pour l'authentification et les capacités, voir :
    app/core/auth/user_auth.py
"""

from typing import Annotated, Optional
from fastapi import Query


class PaginationParams:
    """
    Paramètres de pagination standardisés pour toutes les routes de liste.

    `sort_order` reste à None si le client ne le précise pas : chaque
    service applique alors son ordre par défaut.

    Usage:
        @router.get("/entities")
        def list_entities(pagination: PaginationParams = Depends()):
            # pagination.page, pagination.size, pagination.offset
            ...
    """

    def __init__(
            self,
            page: Annotated[int, Query(ge=1, description="Numéro de page (commence à 1)")] = 1,
            size: Annotated[int, Query(ge=1, le=100, description="Nombre d'éléments par page")] = 20,
            sort_by: Annotated[Optional[str], Query(description="Champ de tri")] = None,
            sort_order: Annotated[Optional[str], Query(pattern="^(asc|desc)$", description="Ordre de tri")] = None,
    ):
        self.page = page
        self.size = size
        self.sort_by = sort_by
        self.sort_order = sort_order

    @property
    def offset(self) -> int:
        """Calcule l'offset pour la requête SQL."""
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        """Alias pour size (compatibilité SQL)."""
        return self.size


def page_count(total: int, size: int) -> int:
    """Nombre de pages nécessaires pour `total` éléments."""
    return (total + size - 1) // size
