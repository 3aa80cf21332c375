# -*- coding: utf-8 -*-
#
# Copyright (C) 2007-2009 Christopher Lenz
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution.

"""Pluggable JSON serializer.

Anything with ``dumps(value) -> str`` and ``loads(text) -> value`` methods can
be passed as the ``serializer`` of a `Database`.
"""

import json

from divan import exceptions


class JSONSerializer(object):
    """Compact, deterministic JSON using the standard library."""

    def __init__(self, ensure_ascii=False):
        self.ensure_ascii = ensure_ascii

    def dumps(self, value):
        try:
            return json.dumps(value, ensure_ascii=self.ensure_ascii, separators=(',', ':'))
        except (TypeError, ValueError) as exc:
            raise exceptions.EncodingError(str(exc)) from exc

    def loads(self, text):
        try:
            return json.loads(text)
        except ValueError as exc:
            raise exceptions.EncodingError("Invalid JSON: %s" % exc) from exc


DEFAULT_SERIALIZER = JSONSerializer()
