# -*- coding: utf-8 -*-
"""
Microsoft Graph API transport for OneDrive operations.

This module provides the request/response objects every OneDrive operation
goes through, plus the retry logic for transient errors.

Relative endpoints ("/me/drive") are resolved against the Graph API root and
authorized with the current access token. Absolute URLs are upload session
URLs: they are pre-authenticated, so no Authorization header is sent, and
they are never retried.
"""

import json
import time

import requests

from .monitoring import rate_monitor
from .utils import is_debug_metadata_enabled, is_debug_enabled


DEFAULT_GRAPH_ENDPOINT = "graph.microsoft.com"
DEFAULT_API_VERSION = "v1.0"


def make_graph_request_with_retry(session, url, headers, method='GET', data=None, json_data=None,
                                  max_retries=3, timeout=300):
    """
    Make a Graph API request with proper retry handling for transient errors.
    Includes rate limiting monitoring via response header analysis.

    Retry Logic:
        - 429 (Rate Limit): Waits for Retry-After header duration
        - 5xx (Server Error): Exponential backoff (2s, 3s, 5s)
        - Timeouts and connection errors: Exponential backoff
        - SSL, proxy and redirect errors: No retry, they are not transient
        - 4xx (Client Error): No retry

    Args:
        session (requests.Session): Session used to send the request
        url (str): The Graph API endpoint URL
        headers (dict): Request headers including Authorization
        method (str): HTTP method ('GET', 'POST', 'PATCH', 'PUT', 'DELETE')
        data (bytes): Raw body (mutually exclusive with json_data)
        json_data (dict): JSON body (mutually exclusive with data)
        max_retries (int): Maximum number of retry attempts (default: 3)
        timeout (float): Per-attempt timeout in seconds

    Returns:
        requests.Response: The HTTP response object. When retries are exhausted
        on 429 or 5xx the last response is returned for the caller to judge.

    Raises:
        requests.exceptions.RequestException: If the transport keeps failing
    """
    debug_metadata = is_debug_metadata_enabled()

    for attempt in range(max_retries + 1):
        try:
            # Add proactive delay if approaching rate limits
            if rate_monitor.should_slow_down() and attempt > 0:
                delay = 2 ** attempt
                if is_debug_enabled():
                    print(f"[⚠] Proactive rate limiting delay: {delay}s")
                time.sleep(delay)

            response = session.request(method.upper(), url, headers=headers, data=data,
                                       json=json_data, timeout=timeout)

            rate_monitor.analyze_response_headers(response, method=method, url=url)

            if response.status_code == 429:
                retry_after = response.headers.get('Retry-After', '60')
                try:
                    wait_seconds = int(retry_after)
                except ValueError:
                    wait_seconds = 60  # Default to 60 seconds if header is malformed

                if attempt < max_retries:
                    if is_debug_enabled():
                        print(f"[!] Rate limited (429). Waiting {wait_seconds} seconds before retry {attempt + 1}/{max_retries}...")
                    if debug_metadata:
                        print(f"[DEBUG] Rate limit response: {response.text[:300]}")
                    time.sleep(wait_seconds)
                    continue
                print(f"[!] Rate limiting exhausted all {max_retries} retries for {method} {url[:100]}")
                return response

            elif 500 <= response.status_code < 600:
                if attempt < max_retries:
                    wait_seconds = (2 ** attempt) + 1  # 2, 3, 5 seconds
                    if is_debug_enabled():
                        print(f"[!] Server error ({response.status_code}). Retrying in {wait_seconds} seconds... ({attempt + 1}/{max_retries})")
                    if debug_metadata:
                        print(f"[DEBUG] Server error response: {response.text[:300]}")
                    time.sleep(wait_seconds)
                    continue
                print(f"[!] Server errors exhausted all {max_retries} retries for {method} {url[:100]}")
                return response

            # Success or client error (don't retry client errors like 400, 401, 403, 404, 409)
            return response

        except (requests.exceptions.SSLError, requests.exceptions.ProxyError,
                requests.exceptions.TooManyRedirects) as e:
            # Configuration problems, retrying will not help
            print("[!] ========================================")
            print(f"[!] {type(e).__name__.upper()}")
            print("[!] ========================================")
            print("[!] Troubleshooting steps:")
            print("[!]   1. Verify system certificate store and clock are up to date")
            print("[!]   2. Verify HTTP_PROXY and HTTPS_PROXY environment variables")
            print(f"[!]   3. Verify the Graph endpoint is correct: {url[:100]}")
            print(f"[!] Technical details: {str(e)[:300]}")
            print("[!] ========================================")
            raise

        except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
            if attempt < max_retries:
                wait_seconds = (2 ** attempt) + 1
                print(f"[!] Network error ({str(e)[:100]}). Retrying in {wait_seconds} seconds... ({attempt + 1}/{max_retries})")
                time.sleep(wait_seconds)
                continue
            print("[!] ========================================")
            print("[!] NETWORK REQUEST FAILED - All retries exhausted")
            print("[!] ========================================")
            print("[!] Troubleshooting steps:")
            print("[!]   1. Verify internet connectivity and DNS resolution")
            print("[!]   2. Ensure firewall allows HTTPS (port 443) to *.microsoft.com")
            print("[!]   3. Check Microsoft 365 service health for outages")
            print(f"[!] URL: {url[:100]}...")
            print("[!] ========================================")
            raise

    # Unreachable: every branch above returns, continues or raises
    raise RuntimeError("Unexpected exit from make_graph_request_with_retry")


class GraphResponse:
    """
    Response to a Graph request.

    Attributes:
        status (int): HTTP status code
        body (bytes): Raw response body
        headers: Case-insensitive response headers
    """

    def __init__(self, response, collection=False):
        self._response = response
        self.status = response.status_code
        self.body = response.content
        self.headers = response.headers
        self.collection = collection

    def json(self):
        """Decode the body as JSON; an empty body decodes to an empty dict."""
        if not self.body:
            return {}
        return json.loads(self.body)

    @property
    def next_link(self):
        """URL of the next page of a collection response, if any"""
        return self.json().get('@odata.nextLink') if self.collection else None

    def get_response_as_object(self, model):
        """
        Deserialize the body into model instances.

        Args:
            model: Class exposing a from_dict() classmethod

        Returns:
            An instance of model, or a list of them for collection requests
        """
        data = self.json()
        if self.collection:
            return [model.from_dict(value) for value in data.get('value', [])]
        return model.from_dict(data)

    def __repr__(self):
        return f"GraphResponse(status={self.status})"


class GraphRequest:
    """
    A single Graph request, built fluently and sent by execute().

    Example:
        response = graph.create_request('PATCH', '/me/drive/items/123') \\
            .attach_body({'name': 'new.txt'}) \\
            .execute()
    """

    collection = False

    def __init__(self, graph, method, endpoint, retry=None):
        self.graph = graph
        self.method = method.upper()
        self.endpoint = endpoint
        self.is_absolute = endpoint.startswith('http://') or endpoint.startswith('https://')
        self.retry = (not self.is_absolute) if retry is None else retry
        self.headers = {}
        self.body = None

        if not self.is_absolute:
            self.headers['Authorization'] = f"Bearer {graph.access_token}"
            self.headers['Accept'] = 'application/json'

    @property
    def url(self):
        if self.is_absolute:
            return self.endpoint
        return f"{self.graph.base_url}{self.endpoint}"

    def add_headers(self, headers):
        """Merge headers into the request; returns self."""
        self.headers.update({name: str(value) for name, value in headers.items()})
        return self

    def attach_body(self, body):
        """Attach a JSON-serializable object or raw bytes as the body; returns self."""
        self.body = body
        return self

    def execute(self):
        """
        Send the request.

        Returns:
            GraphResponse: The response, whatever its status code

        Raises:
            requests.exceptions.RequestException: On transport failures
        """
        data = None
        json_data = None
        if isinstance(self.body, (dict, list)):
            json_data = self.body
        elif self.body is not None:
            data = self.body

        if is_debug_metadata_enabled():
            print(f"[DEBUG] {self.method} {self.url}")

        if self.retry:
            response = make_graph_request_with_retry(
                self.graph.session, self.url, self.headers, method=self.method,
                data=data, json_data=json_data,
                max_retries=self.graph.max_retries, timeout=self.graph.timeout
            )
        else:
            response = self.graph.session.request(
                self.method, self.url, headers=self.headers, data=data,
                json=json_data, timeout=self.graph.timeout
            )
            rate_monitor.analyze_response_headers(response, method=self.method, url=self.url)

        return GraphResponse(response, collection=self.collection)


class GraphCollectionRequest(GraphRequest):
    """A Graph request whose response is a collection ('value' array)"""

    collection = True


class Graph:
    """
    Entry point for building Graph requests.

    Args:
        access_token (str): OAuth access token used for relative endpoints
        graph_endpoint (str): Graph host name (e.g. 'graph.microsoft.com')
        api_version (str): Graph API version segment
        session (requests.Session): HTTP session, created when omitted
        max_retries (int): Retry budget for API requests
        timeout (float): Per-request timeout in seconds
    """

    def __init__(self, access_token=None, graph_endpoint=DEFAULT_GRAPH_ENDPOINT,
                 api_version=DEFAULT_API_VERSION, session=None, max_retries=3, timeout=300):
        self.access_token = access_token
        self.graph_endpoint = graph_endpoint
        self.api_version = api_version
        self.session = session or requests.Session()
        self.max_retries = max_retries
        self.timeout = timeout

    @property
    def base_url(self):
        return f"https://{self.graph_endpoint}/{self.api_version}"

    def set_access_token(self, access_token):
        self.access_token = access_token
        return self

    def create_request(self, method, endpoint, retry=None):
        return GraphRequest(self, method, endpoint, retry=retry)

    def create_collection_request(self, method, endpoint, retry=None):
        return GraphCollectionRequest(self, method, endpoint, retry=retry)
