# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""
Helpers to convert Firestore document payloads into dataclass instances and back.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from dacite import Config, from_dict

from shared.json_utils import convert_keys
from shared.types import Show, SignUpForm, User


def _string_field(data: dict, key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def user_from_document(data: dict[str, Any]) -> User:
    """
    Maps a `users/{uid}` document into a User.

    Missing or non-string fields become empty strings instead of failing.
    """
    return User(
        uid=_string_field(data, "uid"),
        username=_string_field(data, "username"),
        email=_string_field(data, "email"),
    )


def show_from_document(doc_id: str, data: dict[str, Any]) -> Show:
    """
    Decodes a `shows/{id}` document into a Show.

    Raises:
        dacite.DaciteError: If a field is missing or has the wrong type.
    """
    fields = convert_keys(data, "camel_to_snake")
    fields["id"] = doc_id
    return from_dict(data_class=Show, data=fields, config=Config(check_types=True))


def show_to_document(show: Show) -> dict[str, Any]:
    """Encodes a Show into document fields. The id is the document key, not a field."""
    fields = asdict(show)
    fields.pop("id")
    return convert_keys(fields, "snake_to_camel")


def profile_document(uid: str, form: SignUpForm) -> dict[str, Any]:
    """Builds the `users/{uid}` document written at sign-up."""
    return convert_keys(
        {
            "email": form.email,
            "first_name": form.first_name,
            "last_name": form.last_name,
            "uid": uid,
            "username": form.username,
        },
        "snake_to_camel",
    )
