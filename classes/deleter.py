import logging

from concurrent.futures import ThreadPoolExecutor
from typing import List
import pandas as pd

from classes.netsuite import DeleteError, NetSuiteConfigError

TARGET_RECORD_TYPE = "customrecord_sw2022_contract_tranlines"
TARGET_QUERY = f"SELECT id from {TARGET_RECORD_TYPE}"

DELETED = "deleted"
MISSING = "missing"
FAILED = "failed"


class DeletionResult:
    """Outcome of the deletion of one record."""

    def __init__(self, record_id, status, error=None):
        self.record_id = record_id
        self.status = status
        self.error = error

    def __repr__(self):
        return f"DeletionResult({self.record_id!r}, {self.status!r}, {self.error!r})"

    @property
    def succeeded(self):
        return self.status in (DELETED, MISSING)


class DeletionSummary:
    """Per record outcomes of a bulk deletion, in the order the records were enumerated."""

    def __init__(self, results):
        self.results = list(results)

    def _ids_with_status(self, status):
        return [result.record_id for result in self.results if result.status == status]

    @property
    def deleted(self):
        return self._ids_with_status(DELETED)

    @property
    def missing(self):
        return self._ids_with_status(MISSING)

    @property
    def failed(self):
        """Failed IDs paired with the cause of the failure."""
        return [(result.record_id, result.error) for result in self.results if result.status == FAILED]

    @property
    def all_succeeded(self):
        return all(result.succeeded for result in self.results)

    def to_dataframe(self):
        """Get the outcomes as a dataframe with the columns ``Id``, ``Status`` and ``Error``.

        :rtype: pandas.DataFrame
        """
        return pd.DataFrame([{"Id": result.record_id, "Status": result.status, "Error": result.error}
                             for result in self.results],
                            columns=["Id", "Status", "Error"])


class BulkDeleter:
    """Delete every record of a custom record type.

    The records to delete are enumerated with one SuiteQL query, then one delete request per record is submitted to
    a thread pool. Submitting never waits for a previous deletion to complete; :code:`run()` only returns once all
    of them are done.
    """

    def __init__(self, client, record_type=TARGET_RECORD_TYPE, query=TARGET_QUERY, max_workers=8,
                 missing_is_deleted=False):
        """BulkDeleter constructor.

        :param client: an object exposing ``run_suiteql(query)`` and ``delete_record(record_type, record_id)``,
            usually a :code:`classes.netsuite.NetSuite`
        :param record_type: the type of the records to delete
        :param query: the query listing the records to delete, it must select an ``id`` column
        :param max_workers: the maximum number of delete requests in flight
        :param missing_is_deleted: if True a record NetSuite cannot find counts as already deleted, not as a failure
        """
        self.logger = logging.getLogger("sweeper.deleter.BulkDeleter")
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._client = client
        self.record_type = record_type
        self.query = query
        self.max_workers = max_workers
        self.missing_is_deleted = missing_is_deleted

    @classmethod
    def from_config(cls, client, config_file):
        """Create a BulkDeleter with the options of a JSON configuration profile."""
        missing_is_deleted = config_file.get("missing_is_deleted", False)
        if not isinstance(missing_is_deleted, bool):
            raise NetSuiteConfigError(f"missing_is_deleted must be true or false, got {missing_is_deleted!r}")
        return cls(client,
                   record_type=config_file.get("record_type", TARGET_RECORD_TYPE),
                   query=config_file.get("query", TARGET_QUERY),
                   max_workers=int(config_file.get("max_workers", 8)),
                   missing_is_deleted=missing_is_deleted)

    def enumerate(self) -> List[dict]:
        """Get the rows of the records to delete.

        Query errors are not handled here, they propagate to the caller.

        :returns: the rows returned by the query, each with at least an ``id``
        :rtype: list[dict]
        """
        self.logger.debug(f"Listing {self.record_type} records")
        rows = self._client.run_suiteql(self.query)
        self.logger.info(f"There are {len(rows)} {self.record_type} records to delete.")
        return rows

    def delete_one(self, record_id):
        """Delete one record and log the outcome.

        :param record_id: the ID of the record to delete
        :returns: the outcome of the deletion
        :rtype: DeletionResult
        """
        try:
            deleted_id = self._client.delete_record(self.record_type, record_id)
        except DeleteError as del_err:
            if del_err.is_missing and self.missing_is_deleted:
                self.logger.info(f"ID {record_id} was already deleted")
                return DeletionResult(record_id, MISSING)
            self.logger.error(f"Failed to delete ID {record_id}: {del_err}")
            return DeletionResult(record_id, FAILED, str(del_err))
        self.logger.info(f"Deleted ID {deleted_id}")
        return DeletionResult(deleted_id, DELETED)

    def run(self):
        """Delete all the records returned by the query.

        Steps:
            * Run the query once
            * Submit one deletion per returned row to the thread pool
            * Wait for all deletions and log a summary
        :returns: the outcome of every deletion
        :rtype: DeletionSummary
        """
        rows = self.enumerate()
        if not rows:
            self.logger.info("No records to delete.")
            return DeletionSummary([])

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="sweeper") as executor:
            futures = [executor.submit(self.delete_one, row["id"]) for row in rows]
            summary = DeletionSummary(future.result() for future in futures)

        self.logger.info(f"{len(summary.deleted)} deleted, {len(summary.missing)} already missing, "
                         f"{len(summary.failed)} failed")
        failed_ids = [record_id for record_id, _ in summary.failed]
        if failed_ids:
            self.logger.error(f"Failed to delete the records with IDs {failed_ids}")
        return summary
