from abc import ABC, abstractmethod

from recordkv.base.program import Program, TransactionResult


class TransactionalStore(ABC):
    """
    TransactionalStore defines how a transaction program reaches an
    external transactional key-value runtime.
    """

    @abstractmethod
    def execute(self, program: Program) -> TransactionResult:
        """
        Submit one program and block until it has been applied atomically.

        Raises a RecordKVException subclass when the runtime rejects the
        program or cannot be reached.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """
        Release the connection to the runtime.
        """
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
