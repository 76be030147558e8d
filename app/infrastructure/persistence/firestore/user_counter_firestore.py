import logging

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError

from ....application.ports.user_id_allocator import UserIdAllocator
from ....exceptions import StoreError

logger = logging.getLogger(__name__)


class FirestoreUserIdAllocator(UserIdAllocator):
    """Allocates user ids from the ``metadata/userCounter`` document.

    The read-modify-write runs in a Firestore transaction; on contention the
    client re-runs the whole function, up to ``max_attempts`` times.
    """

    def __init__(self, client, collection: str = "metadata", document: str = "userCounter",
                 max_attempts: int = 5):
        self.client = client
        self.collection = collection
        self.document = document
        self.max_attempts = max_attempts

    def next_user_id(self) -> int:
        counter_ref = self.client.collection(self.collection).document(self.document)
        transaction = self.client.transaction(max_attempts=self.max_attempts)

        @firestore.transactional
        def allocate(transaction, ref) -> int:
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                new_id = 1
                transaction.set(ref, {"lastId": new_id})
            else:
                new_id = int(snapshot.to_dict().get("lastId", 0)) + 1
                transaction.update(ref, {"lastId": new_id})
            return new_id

        try:
            new_id = allocate(transaction, counter_ref)
        except (GoogleAPIError, ValueError) as e:
            # ValueError: the client gave up after max_attempts contended commits
            raise StoreError("Failed to allocate user id", details=str(e)) from e
        logger.info(f"Generated userId: {new_id}")
        return new_id
