"""
Storage interface for the breach lookup server.
"""

from abc import abstractmethod

from breachscan.storage.interfaces import JobStorageInterface, RecordStorageInterface


class StorageInterface(JobStorageInterface, RecordStorageInterface):
    """
    A backend that stores both processing jobs and breach records.
    """

    @abstractmethod
    def close(self) -> None:
        """
        Close connections and clean up resources.
        """
        pass
