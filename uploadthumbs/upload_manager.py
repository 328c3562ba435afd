"""
Upload managers - Locate and remove the uploaded source file of a record.
"""

import logging
import os
from collections.abc import Mapping
from typing import Any, Optional

from .artifact import join_url, resolve_template


def get_attribute_value(owner: Any, attribute: str, old: bool = False) -> Optional[str]:
    """
    Read the stored filename of an attribute.

    Args:
        owner: Record holding the attribute (object or mapping)
        attribute: Attribute name
        old: Read the previously stored value instead of the current one.
            Uses ``owner.get_old_attribute(name)`` or an ``old_attributes``
            mapping, falling back to the current value.

    Returns:
        The stored filename, or None
    """
    if old:
        getter = getattr(owner, 'get_old_attribute', None)
        if callable(getter):
            return getter(attribute)
        old_values = owner.get('old_attributes') if isinstance(owner, Mapping) \
            else getattr(owner, 'old_attributes', None)
        if isinstance(old_values, Mapping):
            return old_values.get(attribute)

    if isinstance(owner, Mapping):
        return owner.get(attribute)
    return getattr(owner, attribute, None)


class UploadManager:
    """
    Interface for the collaborator owning the original uploaded file.
    """

    def get_upload_path(self, owner: Any, attribute: str, old: bool = False) -> Optional[str]:
        raise NotImplementedError

    def get_upload_url(self, owner: Any, attribute: str) -> Optional[str]:
        raise NotImplementedError

    def delete(self, owner: Any, attribute: str, old: bool = False) -> None:
        raise NotImplementedError


class LocalUploadManager(UploadManager):
    """
    Upload manager storing originals in a local directory.
    """

    def __init__(
        self,
        path: str,
        url: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize upload manager.

        Args:
            path: Directory template for originals, e.g. '/srv/upload/{id}'
            url: URL template for originals, e.g. '/upload/{id}'
            logger: Optional logger instance
        """
        self.path = path
        self.url = url
        self.logger = logger or logging.getLogger(__name__)

    def get_upload_path(self, owner: Any, attribute: str, old: bool = False) -> Optional[str]:
        """Get the absolute path of the stored file, or None if no file is stored."""
        filename = get_attribute_value(owner, attribute, old)
        if not filename:
            return None
        return os.path.join(resolve_template(self.path, owner), filename)

    def get_upload_url(self, owner: Any, attribute: str) -> Optional[str]:
        """Get the public URL of the stored file, or None."""
        filename = get_attribute_value(owner, attribute)
        if not filename or self.url is None:
            return None
        return join_url(resolve_template(self.url, owner), filename)

    def delete(self, owner: Any, attribute: str, old: bool = False) -> None:
        """Remove the stored file. A missing file is not an error."""
        path = self.get_upload_path(owner, attribute, old)
        if path and os.path.isfile(path):
            os.remove(path)
            self.logger.info(f"Deleted original: {path}")
