import unittest
from unittest.mock import MagicMock, patch

from google.api_core import exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP, Increment

from portfolio_api import offers
from portfolio_api.db import FirestoreDbClient, LikeOutcome
from portfolio_api.errors import InvalidTransitionError, StoreError
from portfolio_api.offers import next_status
from portfolio_api.records import LikeRecord, OfferRecord, OfferStatus
from portfolio_api.schemas import Offer


def _identity_decorator(func):
    return func


@patch("portfolio_api.db.firestore.transactional", side_effect=_identity_decorator)
class FirestoreDbClientTests(unittest.TestCase):
    """
    Uses a MagicMock in place of the Firestore client; transactions run the
    wrapped function directly.
    """

    def setUp(self):
        self.client = MagicMock()
        self.collections = {}
        self.client.collection.side_effect = self._collection
        self.transaction = self.client.transaction.return_value
        self.db = FirestoreDbClient(self.client)

    def _collection(self, name):
        if name not in self.collections:
            collection = MagicMock(name=name)
            refs = {}

            def document(doc_id, refs=refs, name=name):
                if doc_id not in refs:
                    refs[doc_id] = MagicMock(name=f"{name}/{doc_id}")
                return refs[doc_id]

            collection.document.side_effect = document
            self.collections[name] = collection
        return self.collections[name]

    def _doc(self, collection, doc_id, exists, data=None):
        ref = self.client.collection(collection).document(doc_id)
        ref.get.return_value.exists = exists
        ref.get.return_value.id = doc_id
        ref.get.return_value.to_dict.return_value = data
        return ref

    def test_add_like_records_in_one_transaction(self, _):
        like_ref = self._doc("likes", "p1_u1", exists=False)
        project_ref = self._doc("projects", "p1", exists=True)

        outcome = self.db.add_like(LikeRecord(project_id="p1", user_identifier="u1"))

        self.assertEqual(outcome, LikeOutcome.RECORDED)
        like_ref.get.assert_called_once_with(transaction=self.transaction)
        project_ref.get.assert_called_once_with(transaction=self.transaction)
        update_ref, update_fields = self.transaction.update.call_args[0]
        self.assertIs(update_ref, project_ref)
        self.assertIsInstance(update_fields["likes"], Increment)
        self.assertEqual(update_fields["likes"].value, 1)
        self.transaction.set.assert_called_once_with(
            like_ref,
            {"projectId": "p1", "userIdentifier": "u1", "timestamp": SERVER_TIMESTAMP},
        )

    def test_add_like_duplicate_writes_nothing(self, _):
        self._doc("likes", "p1_u1", exists=True)
        self._doc("projects", "p1", exists=True)

        outcome = self.db.add_like(LikeRecord(project_id="p1", user_identifier="u1"))

        self.assertEqual(outcome, LikeOutcome.DUPLICATE)
        self.transaction.update.assert_not_called()
        self.transaction.set.assert_not_called()

    def test_add_like_missing_project_writes_nothing(self, _):
        self._doc("likes", "p1_u1", exists=False)
        self._doc("projects", "p1", exists=False)

        outcome = self.db.add_like(LikeRecord(project_id="p1", user_identifier="u1"))

        self.assertEqual(outcome, LikeOutcome.PROJECT_MISSING)
        self.transaction.update.assert_not_called()
        self.transaction.set.assert_not_called()

    def test_create_offer_uses_offer_id_as_document_id(self, _):
        offer = OfferRecord(
            offer_id="abc",
            project_id="p1",
            email="a@x.com",
            subject="roof repair",
            amount=500,
        )
        ref = self.client.collection("offers").document("abc")

        self.db.create_offer(offer)

        ref.create.assert_called_once_with(
            {
                "offerId": "abc",
                "projectId": "p1",
                "email": "a@x.com",
                "subject": "roof repair",
                "amount": 500,
                "status": "pending",
                "timestamp": SERVER_TIMESTAMP,
            }
        )
        self.assertIs(offer.created_at, ref.create.return_value.update_time)

    def test_update_offer_status(self, _):
        ref = self._doc(
            "offers", "abc", exists=True, data={"offerId": "abc", "status": "pending"}
        )

        offer = self.db.update_offer_status(
            "abc", lambda current: next_status(current, OfferStatus.APPROVED)
        )

        self.assertEqual(offer.status, OfferStatus.APPROVED)
        self.transaction.update.assert_called_once_with(
            ref, {"status": "approved", "updatedTimestamp": SERVER_TIMESTAMP}
        )

    def test_update_offer_status_refused_transition(self, _):
        self._doc(
            "offers", "abc", exists=True, data={"offerId": "abc", "status": "rejected"}
        )

        with self.assertRaises(InvalidTransitionError):
            self.db.update_offer_status(
                "abc", lambda current: next_status(current, OfferStatus.APPROVED)
            )
        self.transaction.update.assert_not_called()

    def test_update_missing_offer(self, _):
        self._doc("offers", "abc", exists=False)
        self.assertIsNone(
            self.db.update_offer_status("abc", lambda current: OfferStatus.APPROVED)
        )
        self.transaction.update.assert_not_called()

    def test_list_offers_newest_first_query(self, _):
        doc = MagicMock()
        doc.id = "abc"
        doc.to_dict.return_value = {"offerId": "abc", "status": "pending"}
        query = self.client.collection("offers").order_by.return_value
        query.stream.return_value = [doc]

        listed = self.db.list_offers()

        self.client.collection("offers").order_by.assert_called_once_with(
            "timestamp", direction="DESCENDING"
        )
        self.assertEqual([o.offer_id for o in listed], ["abc"])

    def test_list_offers_keeps_document_id(self, _):
        doc = MagicMock()
        doc.id = "autoDocId123"
        doc.to_dict.return_value = {"offerId": "uuid-abc", "status": "beklemede"}
        query = self.client.collection("offers").order_by.return_value
        query.stream.return_value = [doc]

        listed = self.db.list_offers()

        self.assertEqual(listed[0].offer_id, "uuid-abc")
        self.assertEqual(listed[0].document_id, "autoDocId123")
        self.assertEqual(Offer.from_record(listed[0]).id, "autoDocId123")

    def test_offer_decided_by_document_id(self, _):
        ref = self._doc(
            "offers",
            "autoDocId123",
            exists=True,
            data={"offerId": "uuid-abc", "status": "beklemede"},
        )

        offer = offers.approve_offer(self.db, "autoDocId123")

        self.assertEqual(offer.status, OfferStatus.APPROVED)
        self.assertEqual(offer.document_id, "autoDocId123")
        self.transaction.update.assert_called_once_with(
            ref, {"status": "approved", "updatedTimestamp": SERVER_TIMESTAMP}
        )

    def test_google_errors_become_store_errors(self, _):
        self.client.collection.side_effect = exceptions.ServiceUnavailable("down")
        with self.assertRaises(StoreError) as ctx:
            self.db.list_messages()
        self.assertNotIn("down", ctx.exception.message)


if __name__ == "__main__":
    unittest.main()
