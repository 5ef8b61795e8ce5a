# =============================================================================
# core/services/privacy.py - Privacy Gate
# =============================================================================
# Decides who may see and who may change an idea's stored objects.
# Pure functions of (viewer, object, creator); no I/O.
# =============================================================================

from typing import Iterable, TypeVar

from app.exceptions import PermissionDeniedError
from core.models.storage import StoredDocument, StoredImage, StoredObject
from lib.utils import same_user

ObjectT = TypeVar("ObjectT", StoredDocument, StoredImage)


class PrivacyGate:
    """
    Authorization predicates for stored objects.

    Rules:
    - Public objects are visible to everyone, including anonymous viewers
    - Private objects are visible to the idea's creator only
    - Only the creator may upload, re-label, hide or delete objects
    """

    @staticmethod
    def is_creator(actor_id: str | None, creator_id: str | None) -> bool:
        return same_user(actor_id, creator_id)

    @staticmethod
    def can_view(
        viewer_id: str | None,
        obj: StoredObject,
        creator_id: str | None,
    ) -> bool:
        """True if the object is public or the viewer created the idea."""
        return not obj.is_private or same_user(viewer_id, creator_id)

    @staticmethod
    def must_sign(obj: StoredObject) -> bool:
        """
        Whether the object has to be served through a signed URL.

        Always True: objects are written with a private ACL, so even public
        ones have no readable unsigned URL.
        """
        return True

    @staticmethod
    def require_creator(
        actor_id: str | None,
        creator_id: str | None,
        action: str,
        idea_id: str | None = None,
    ) -> None:
        """
        Raises:
            PermissionDeniedError: If the actor is not the idea's creator
        """
        if not same_user(actor_id, creator_id):
            raise PermissionDeniedError(action, idea_id=idea_id)

    @staticmethod
    def partition(
        objects: Iterable[ObjectT],
        viewer_id: str | None,
        creator_id: str | None,
    ) -> tuple[list[ObjectT], int]:
        """
        Split objects into the ones the viewer can see and a hidden count.

        Returns:
            (visible objects in their original order, number hidden)
        """
        visible: list[ObjectT] = []
        hidden = 0
        for obj in objects:
            if PrivacyGate.can_view(viewer_id, obj, creator_id):
                visible.append(obj)
            else:
                hidden += 1
        return visible, hidden
