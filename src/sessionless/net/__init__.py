# Copyright 2026 Firefly Software Solutions Inc.
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
"""Sessionless Net — URL classification, query surgery and safe rewriting."""

from sessionless.net.extensions import (
    COOKIE_EXCLUDED_EXTENSIONS,
    EXCLUDED_EXTENSIONS,
    has_excluded_extension,
    is_localized_path,
)
from sessionless.net.rewriter import (
    BASE_EXCLUDED_SCHEMES,
    LOCAL_EXCLUDED_SCHEMES,
    Augmenter,
    rewrite_url,
)
from sessionless.net.uri import (
    SplitUrl,
    add_parameter,
    add_parameters,
    has_parameter,
    has_scheme,
    is_scheme,
    split_url,
    to_ascii,
    to_iri,
)

__all__ = [
    "Augmenter",
    "BASE_EXCLUDED_SCHEMES",
    "COOKIE_EXCLUDED_EXTENSIONS",
    "EXCLUDED_EXTENSIONS",
    "LOCAL_EXCLUDED_SCHEMES",
    "SplitUrl",
    "add_parameter",
    "add_parameters",
    "has_excluded_extension",
    "has_parameter",
    "has_scheme",
    "is_localized_path",
    "is_scheme",
    "rewrite_url",
    "split_url",
    "to_ascii",
    "to_iri",
]
