import logging
from typing import Optional

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore_v1.base_query import FieldFilter

from ....application.ports.user_repo import UserRepository, UserDto
from ....exceptions import StoreError

logger = logging.getLogger(__name__)

class FirestoreUserRepository(UserRepository):
    def __init__(self, client, collection: str = "users"):
        self.client = client
        self.collection = collection

    def _to_dto(self, data: dict) -> UserDto:
        return UserDto(
            user_id=int(data["userId"]),
            full_name=data.get("fullName"),
            phone_number=data.get("phoneNumber"),
            email=data.get("email"),
            created_at=data.get("createdAt"),
        )

    def _first_where(self, field: str, value: str) -> Optional[UserDto]:
        query = self.client.collection(self.collection).where(filter=FieldFilter(field, "==", value)).limit(1)
        try:
            docs = list(query.stream())
        except GoogleAPIError as e:
            raise StoreError(f"User lookup by {field} failed", details=str(e)) from e
        if not docs:
            return None
        return self._to_dto(docs[0].to_dict())

    def get_by_phone(self, phone_number: str) -> Optional[UserDto]:
        return self._first_where("phoneNumber", phone_number)

    def get_by_email(self, email: str) -> Optional[UserDto]:
        return self._first_where("email", email)

    def create(self, user_id: int, full_name: str, phone_number: str, email: str) -> UserDto:
        doc_ref = self.client.collection(self.collection).document(str(user_id))
        try:
            doc_ref.set({
                "userId": user_id,
                "fullName": full_name,
                "phoneNumber": phone_number,
                "email": email,
                "createdAt": firestore.SERVER_TIMESTAMP,
            })
        except GoogleAPIError as e:
            raise StoreError("Failed to store user", details=str(e)) from e
        logger.info(f"Stored user data for userId: {user_id}")
        return UserDto(user_id=user_id, full_name=full_name, phone_number=phone_number, email=email)
