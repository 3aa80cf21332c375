# -*- coding: utf-8 -*-
#
# Copyright (C) 2007-2009 Christopher Lenz
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution.

import logging

import requests.exceptions
from requests_toolbelt import sessions

from divan import exceptions
from divan.response import CouchResponse, raise_for_status
from divan.serializer import DEFAULT_SERIALIZER

__all__ = ['Session']

log = logging.getLogger(__name__)


class Session(object):
    """Wrapper around BaseUrlSession that automatically wraps certain exceptions when making requests

    :param base_url: URL every request path is relative to
    :param auth: a credential provider, i.e. any `requests.auth.AuthBase`
    :param timeout: seconds to wait for the server, passed to the transport
    :param transport: object with a ``requests.Session`` compatible
                      ``request`` method; a ``BaseUrlSession`` by default
    """

    def __init__(self, base_url, auth=None, timeout=None, transport=None, serializer=DEFAULT_SERIALIZER):
        if transport is None:
            transport = sessions.BaseUrlSession(base_url=_with_slash(base_url))
        self._base_session = transport
        self.base_url = base_url
        self._base_session.auth = auth
        self.timeout = timeout
        self.serializer = serializer

    @property
    def base_url(self):
        return self._base_session.base_url

    @base_url.setter
    def base_url(self, url):
        self._base_session.base_url = _with_slash(url)

    @property
    def auth(self):
        return self._base_session.auth

    @auth.setter
    def auth(self, auth):
        self._base_session.auth = auth

    def _transport_request(self, method, url, **kwargs):
        if self.timeout is not None:
            kwargs.setdefault('timeout', self.timeout)
        log.debug("%s %s", method, url)
        try:
            resp = self._base_session.request(method, str(url), **kwargs)
        except requests.exceptions.Timeout as exc:
            raise exceptions.Timeout(str(exc)) from exc
        except requests.exceptions.RequestException as exc:
            raise exceptions.RequestsException(str(exc)) from exc
        if resp is None:
            raise exceptions.EmptyResponse("No response to %s %s" % (method, url))
        return CouchResponse(resp, self.serializer)

    def send(self, request):
        """Send a `CouchRequest` and return the `CouchResponse`, whatever its status.

        Only transport failures raise here; interpreting the status is left
        to the decoders in `divan.response`.
        """
        return self._transport_request(
            request.method,
            request.url,
            data=request.body,
            headers=request.headers,
            stream=request.stream,
        )

    def request(self, method, url, **kwargs):
        resp = self._transport_request(method, url, **kwargs)
        raise_for_status(resp)
        return resp

    def head(self, url, **kwargs):
        return self.request("HEAD", url=url, **kwargs)

    def get(self, url, **kwargs):
        return self.request("GET", url=url, **kwargs)

    def put(self, url, data=None, **kwargs):
        return self.request("PUT", url=url, data=data, **kwargs)

    def post(self, url, data=None, json=None, **kwargs):
        return self.request("POST", url=url, data=data, json=json, **kwargs)

    def delete(self, url, **kwargs):
        return self.request("DELETE", url=url, **kwargs)


def _with_slash(url):
    if url and not url.endswith('/'):
        return url + '/'
    return url
