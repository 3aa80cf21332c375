# -*- coding: utf-8 -*-
#
# Copyright (C) 2007-2009 Christopher Lenz
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution.

from divan import exceptions
from divan.auth import BasicAuth, CookieAuth
from divan.bulk import BulkResult, BulkWrite
from divan.client import Attachment, Database, Server
from divan.config import ClientConfig
from divan.document import Document, SecurityDocument
from divan.options import EncodedQuery, ViewOptions
from divan.views import BulkItem, ListResult, Row, ViewResult

__version__ = '1.0.0'
