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

import uuid
from dataclasses import dataclass
from typing import Optional


def new_show_id() -> str:
    """Returns a random document id for a show created on this client."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class User:
    """Profile of the signed-in user, read from `users/{uid}`."""

    uid: str
    username: str
    email: str


@dataclass(frozen=True)
class Show:
    """A tracked show, stored as `shows/{id}`."""

    show_name: str
    uid: str
    ep_count: int
    id: Optional[str] = None


@dataclass
class SignUpForm:
    """Values entered on the account creation form."""

    email: str = ""
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    password: str = ""
    confirm_password: str = ""
