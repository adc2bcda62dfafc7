import logging

from typing import List
from decouple import config
import requests
from requests.exceptions import HTTPError, RequestException


class NetSuiteError(Exception):
    """Base class for every error raised while talking to NetSuite."""


class NetSuiteConfigError(NetSuiteError):
    """The configuration profile cannot be used to reach NetSuite."""


class QueryError(NetSuiteError):
    """A SuiteQL query was rejected or could not be executed."""


class DeleteError(NetSuiteError):
    """A record deletion was rejected or could not be sent.

    :param record_id: the ID of the record that could not be deleted
    :param message: the cause, as reported by NetSuite when available
    :param status_code: the HTTP status code, None if no response was received
    """

    def __init__(self, record_id, message, status_code=None):
        super().__init__(message)
        self.record_id = record_id
        self.status_code = status_code

    @property
    def is_missing(self):
        """True when NetSuite reports that the record does not exist."""
        return self.status_code == 404


class NetSuite:
    """A class provides a utility interface to the NetSuite REST web services. It runs SuiteQL queries and deletes
    records through the REST record service.

    Authentication is not handled here: an access token obtained beforehand is expected in the configuration
    profile, or in the ``NETSUITE_ACCESS_TOKEN`` environment variable.
    """

    def __init__(self, config_file):
        """NetSuite object constructor.

        Instantiate a NetSuite object with a given json configuration. The configuration can target a sandbox or a
        production account, and must be provided as input at runtime.
        :param config_file: a dict loaded from a JSON config file
        :type config_file: dict
        """
        self.logger = logging.getLogger("sweeper.netsuite.NetSuite")
        self.logger.debug("Initiating NetSuite API object")
        self._load_config(config_file)
        self._header = None

        self._create_header()

    def _load_config(self, config_file):
        """Load configuration for JSON file.

        Private method to load configurations to attributes.
        :param config_file: a dict loaded from a JSON config file
        :return: None
        """
        self._url_base = self.build_base_url(config_file)
        self._url_suiteql = self._url_base + "/services/rest/query/v1/suiteql"
        self._url_record = self._url_base + "/services/rest/record/v1/{}/{}"
        self._query_limit = int(config_file.get("query_limit", 1000))
        self._timeout = float(config_file.get("timeout", 60))
        self._access_token = config_file.get("access_token") or config("NETSUITE_ACCESS_TOKEN", default=None)
        if not self._access_token:
            raise NetSuiteConfigError("No access token found in the configuration or in NETSUITE_ACCESS_TOKEN")

    @staticmethod
    def build_base_url(config_file):
        """Get the REST base URL of an account.

        ``url_base`` wins when present. Otherwise the URL is derived from ``account_id``, where sandbox accounts
        such as ``1234567_SB1`` map to the ``1234567-sb1`` host.

        :param config_file: a dict loaded from a JSON config file
        :returns: the base URL, without trailing slash
        :rtype: str
        """
        url_base = config_file.get("url_base")
        if url_base:
            return url_base.rstrip("/")
        account_id = config_file.get("account_id")
        if not account_id:
            raise NetSuiteConfigError("Either url_base or account_id must be set in the configuration")
        host = str(account_id).strip().lower().replace("_", "-")
        return f"https://{host}.suitetalk.api.netsuite.com"

    def _create_header(self):
        """Create the HTTP header.

        Private method that inserts the bearer token in the header.
        """
        self._header = {"Authorization": "Bearer " + self._access_token,
                        "Content-Type": "application/json"}
        self.logger.debug("Header updated with Bearer token and Content-Type")

    @staticmethod
    def _error_detail(response):
        """Extract the human readable error of a NetSuite error response.

        :param response: a failed response, or None
        :type response: requests.Response
        :returns: the ``o:errorDetails`` details joined together, the raw body otherwise
        :rtype: str
        """
        if response is None:
            return ""
        try:
            body = response.json()
        except ValueError:
            return response.text
        details = body.get("o:errorDetails") if isinstance(body, dict) else None
        if not isinstance(details, list):
            return response.text
        return "; ".join(str(item.get("detail", "")) for item in details if isinstance(item, dict)) or response.text

    def _run_http_request(self, request_type, url, payload=None, params=None, headers=None):
        """Run an HTTP request.

        Private method that leverages the ``request`` package in order to run HTTP requests. Unlike a best effort
        call, errors are raised to the caller, which decides how to report them.

        :param request_type: The type of request e.g. POST, GET, DELETE
        :param url: the endpoint URL
        :param payload: Optional JSON payload
        :param params: Optional query string parameters
        :param headers: Optional headers added to the default header
        :returns: An http response
        :rtype: requests.Response
        :raises requests.exceptions.RequestException: if the request fails or returns an error status
        """
        header = dict(self._header)
        if headers:
            header.update(headers)
        response = requests.request(request_type, url, headers=header, json=payload, params=params,
                                    timeout=self._timeout)
        response.raise_for_status()
        self.logger.debug(f"{request_type} request successfully executed on {url}")
        return response

    def run_suiteql(self, query) -> List[dict]:
        """Run a SuiteQL query and return its rows.

        Public method that runs a read-only query against the SuiteQL REST endpoint. Only the rows returned by the
        first response are used: when NetSuite reports more rows, a warning is logged.

        :param query: the SuiteQL query text
        :type query: str
        :returns: the rows as mappings from column name to value, without the ``links`` key
        :rtype: list[dict]
        :raises QueryError: if the query cannot be executed
        """
        self.logger.debug(f"Running SuiteQL query: {query}")
        try:
            response = self._run_http_request("POST",
                                              self._url_suiteql,
                                              payload={"q": query},
                                              params={"limit": self._query_limit},
                                              headers={"Prefer": "transient"})
            response_json = response.json()
        except HTTPError as http_err:
            raise QueryError(f"Query failed: {self._error_detail(http_err.response) or http_err}") from http_err
        except ValueError as err:
            raise QueryError(f"Query returned an invalid body: {err}") from err
        except RequestException as err:
            raise QueryError(f"Query could not be sent: {err}") from err
        if not isinstance(response_json, dict):
            raise QueryError(f"Query returned an invalid body: {response.text}")

        rows = [{key: value for key, value in item.items() if key != "links"}
                for item in response_json.get("items", [])]
        if response_json.get("hasMore"):
            self.logger.warning(f"Query returned {len(rows)} rows out of {response_json.get('totalResults')}. "
                                f"Run again to process the remaining rows.")
        self.logger.debug(f"Query returned {len(rows)} rows")
        return rows

    def delete_record(self, record_type, record_id):
        """Delete a record in NetSuite.

        Public method that runs an HTTP DELETE request on the REST record endpoint.

        :param record_type: the record type, e.g. a custom record script ID
        :type record_type: str
        :param record_id: the internal ID of the record to delete
        :returns: the ID of the deleted record
        :raises DeleteError: if the record cannot be deleted
        """
        url_delete = self._url_record.format(record_type, record_id)
        self.logger.debug(f"Deleting {record_type} with ID {record_id}")
        try:
            self._run_http_request("DELETE", url_delete)
        except HTTPError as http_err:
            status_code = http_err.response.status_code if http_err.response is not None else None
            raise DeleteError(record_id, self._error_detail(http_err.response) or str(http_err),
                              status_code=status_code) from http_err
        except RequestException as err:
            raise DeleteError(record_id, str(err)) from err
        return record_id
