"""
Erreurs métier du suivi des affectations.

Chaque erreur porte un `kind` vérifiable par machine et un message lisible. Aucune n'est fatale
pour le processus: l'appelant corrige la requête et la soumet à nouveau.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Catégories d'erreurs exposées à l'appelant."""

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_ORDERING = "invalid_ordering"


class StargateError(Exception):
    """Erreur métier de base."""

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"code": self.kind.value, "message": self.message}


class InvalidArgumentError(StargateError):
    """Champ requis manquant/vide ou référence de personne invalide."""

    kind = ErrorKind.INVALID_ARGUMENT


class NotFoundError(StargateError):
    """Personne ou projection absente alors qu'elle est requise."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(StargateError):
    """Soumission en double, nom déjà pris ou écriture concurrente perdue."""

    kind = ErrorKind.CONFLICT


class InvalidOrderingError(StargateError):
    """Nouvelle affectation ne démarrant pas strictement après l'affectation ouverte."""

    kind = ErrorKind.INVALID_ORDERING
