"""
Profile CRUD, shared by the doctor and patient dashboards.
"""

import logging
from typing import Any, Dict, Optional, Type

from clinic.errors import NotFoundError
from clinic.models import Profile

logger = logging.getLogger(__name__)


class ProfileManager:
    """
    Loads and saves one user's profile document in ``collection``.

    ``profile`` is the last loaded/saved snapshot, ``draft`` holds the
    values being edited.  ``cancel_edit`` puts the snapshot back into the
    draft.
    """

    def __init__(self, store, collection: str, model: Type[Profile]):
        self._store = store
        self.collection = collection
        self.model = model
        self.profile = model()
        self.draft = model()
        self.is_editing = False

    def load_profile(self, user_id: str) -> Optional[Profile]:
        try:
            doc = self._store.get_one(self.collection, user_id)
        except NotFoundError:
            logger.info("No %s profile for %s yet", self.collection, user_id)
            return None
        self.profile = self.model.from_document(doc)
        self.draft = self.profile.model_copy()
        return self.profile

    def save_profile(self, user_id: str, fields: Optional[Dict[str, Any]] = None) -> Profile:
        """
        Upsert-merge *fields* (attribute names) into the user's document.

        Defaults to the whole draft.  Only the given profile fields are
        written; anything else already stored is left alone.  Storage
        errors propagate and leave the manager unchanged.
        """
        if fields is None:
            fields = self.draft.model_dump(include=set(self.model.editable_fields()))
        values = {k: v for k, v in fields.items() if k in self.model.editable_fields()}
        update = self.model(**values).to_document(include=set(values))
        self._store.upsert_merge(self.collection, user_id, update)

        self.profile = self.profile.model_copy(update={"id": user_id, **values})
        self.draft = self.profile.model_copy()
        self.is_editing = False
        return self.profile

    def begin_edit(self) -> None:
        self.draft = self.profile.model_copy()
        self.is_editing = True

    def cancel_edit(self) -> None:
        self.draft = self.profile.model_copy()
        self.is_editing = False
