# ==============================================================================
# PROFILE SERVICE
# ==============================================================================
# Customer profile form: field validation, avatar checks, area filtering and
# the display helpers for avatars (URL, initials).
# ==============================================================================

import os
from typing import Any, Dict, List, Optional, Tuple

from werkzeug.utils import secure_filename

from storefront import config
from storefront.models import Area, Customer, Governorate, to_int
from storefront.repositories.errors import ApiError, BackendUnavailable, Unauthorized
from storefront.repositories.interfaces import IAccountRepository, ILocationRepository


ADDRESS_MAX = 500
STORAGE_PREFIX = '/storage/'


# ==============================================================================
# AVATAR DISPLAY
# ==============================================================================

def avatar_url(avatar: Optional[str]) -> Optional[str]:
    """
    Public URL of an avatar.

    Absolute URLs and rooted paths are used as they are; bare storage paths
    get the /storage/ prefix.
    """
    if not avatar:
        return None
    if avatar.startswith('http') or avatar.startswith('/'):
        return avatar
    return STORAGE_PREFIX + avatar


def initials(name: Optional[str]) -> str:
    """First letters of the first two words, upper-cased."""
    words = (name or '').split()
    return ''.join(word[0] for word in words[:2]).upper()


def allowed_avatar(filename: str) -> bool:
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in config.AVATAR_EXTENSIONS


def _file_size(file) -> int:
    stream = file.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


# ==============================================================================
# AREAS
# ==============================================================================

def areas_for_governorate(areas: List[Area], governorate_id: Any) -> List[Area]:
    """
    Areas selectable for a governorate.

    Areas are matched on their governorate_id. An area that does not report
    one cannot be placed and stays selectable everywhere.
    """
    governorate_id = to_int(governorate_id)
    if governorate_id is None:
        return list(areas)
    return [a for a in areas if a.governorate_id is None or a.governorate_id == governorate_id]


# ==============================================================================
# SERVICE
# ==============================================================================

class ProfileService:
    """
    Service for the customer profile.

    Responsibilities:
    - Options for the governorate and area selects
    - Validation before submission
    - Multipart submission (avatar optional)
    """

    def __init__(self, account_repo: IAccountRepository, location_repo: ILocationRepository):
        """
        Args:
            account_repo: Profile endpoints
            location_repo: Governorates and areas
        """
        self.account_repo = account_repo
        self.location_repo = location_repo

    def form_options(self) -> Dict[str, Any]:
        return {
            'governorates': [Governorate.from_dict(g) for g in self.location_repo.governorates()],
            'areas': [Area.from_dict(a) for a in self.location_repo.areas()],
        }

    def validate(self, form: Dict[str, Any], avatar=None) -> Tuple[Dict[str, Any], Dict[str, str]]:
        """
        Check the profile form.

        Args:
            form: name, phone, address, governorate_id, area_id
            avatar: Uploaded FileStorage or None

        Returns:
            (fields, errors)
        """
        errors = {}
        fields = {
            'name': (form.get('name') or '').strip(),
            'phone': (form.get('phone') or '').strip(),
            'address': (form.get('address') or '').strip(),
            'governorate_id': to_int(form.get('governorate_id')),
            'area_id': to_int(form.get('area_id')),
        }

        for name in ('name', 'phone', 'governorate_id', 'area_id'):
            if not fields[name]:
                errors[name] = 'field_required'
        if len(fields['address']) > ADDRESS_MAX:
            errors['address'] = 'field_too_long'

        if avatar is not None and avatar.filename:
            if not allowed_avatar(secure_filename(avatar.filename)):
                errors['avatar'] = 'avatar_invalid_type'
            elif _file_size(avatar) > config.MAX_UPLOAD_MB * 1024 * 1024:
                errors['avatar'] = 'avatar_too_large'

        return fields, errors

    def update(self, form: Dict[str, Any], avatar=None) -> Dict[str, Any]:
        """
        Validate and send the profile.

        Returns:
            Dict with ok and the refreshed customer, or errors
        """
        fields, errors = self.validate(form, avatar)
        if errors:
            return {'ok': False, 'errors': errors}

        if avatar is not None and not avatar.filename:
            avatar = None

        try:
            data = self.account_repo.update_profile(fields, avatar)
        except (Unauthorized, BackendUnavailable):
            raise
        except ApiError as e:
            return {'ok': False, 'error': e.message, 'errors': e.errors}

        user = data.get('user') if isinstance(data, dict) and 'user' in data else data
        return {'ok': True, 'customer': Customer.from_dict(user) if user else None}
