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
"""Tests for @order decorator and ordering constants."""

from sessionless.container.ordering import (
    HIGHEST_PRECEDENCE,
    LOWEST_PRECEDENCE,
    get_order,
    order,
    sort_by_order,
)


class TestOrderDecorator:
    def test_sets_order_attribute(self):
        @order(5)
        class MyFilter:
            pass

        assert MyFilter.__sessionless_order__ == 5

    def test_preserves_class(self):
        @order(1)
        class MyFilter:
            """My doc."""

        assert MyFilter.__name__ == "MyFilter"
        assert MyFilter.__doc__ == "My doc."


class TestGetOrder:
    def test_default_is_zero(self):
        class Plain:
            pass

        assert get_order(Plain) == 0
        assert get_order(Plain()) == 0

    def test_instances_use_class_order(self):
        @order(HIGHEST_PRECEDENCE + 10)
        class Early:
            pass

        assert get_order(Early()) == HIGHEST_PRECEDENCE + 10


class TestSortByOrder:
    def test_sorts_and_keeps_ties_stable(self):
        @order(LOWEST_PRECEDENCE)
        class Last:
            pass

        @order(HIGHEST_PRECEDENCE)
        class First:
            pass

        class A:
            pass

        class B:
            pass

        a, b, first, last = A(), B(), First(), Last()
        assert sort_by_order([last, a, first, b]) == [first, a, b, last]

    def test_constants(self):
        assert HIGHEST_PRECEDENCE < 0 < LOWEST_PRECEDENCE
