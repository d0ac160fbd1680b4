import unittest
from unittest.mock import MagicMock

from postgrest.exceptions import APIError

from campus_proxy.store import InMemoryStoreClient, StoreError, SupabaseStoreClient


class InMemoryStoreClientTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryStoreClient(
            tables={
                "Professors": [
                    {"id": 2, "name": "Grace"},
                    {"id": 1, "name": "Alan"},
                ]
            }
        )

    def test_select_orders_and_projects(self):
        rows = self.store.select("Professors", "name", order_by="id", ascending=False)
        self.assertEqual(rows, [{"name": "Grace"}, {"name": "Alan"}])

    def test_select_missing_table(self):
        with self.assertRaises(StoreError) as ctx:
            self.store.select("Students")
        self.assertEqual(ctx.exception.code, "42P01")

    def test_insert_assigns_next_id(self):
        rows = self.store.insert("Professors", {"name": "Ada"})
        self.assertEqual(rows, [{"name": "Ada", "id": 3}])

    def test_update_returns_changed_rows(self):
        self.assertEqual(self.store.update("Professors", {"name": "X"}, "42"), [])
        rows = self.store.update("Professors", {"name": "X"}, "1")
        self.assertEqual(rows, [{"id": 1, "name": "X"}])

    def test_delete_in_rejects_non_integer_ids(self):
        with self.assertRaises(StoreError) as ctx:
            self.store.delete_in("Professors", [1, "abc"])
        self.assertEqual(ctx.exception.code, "22P02")
        self.assertEqual(len(self.store.tables["Professors"]), 2)

    def test_only_plain_digits_are_ids(self):
        for bad in ("1_0", "١", " "):
            with self.assertRaises(StoreError):
                self.store.delete("Professors", bad)
        self.assertEqual(len(self.store.tables["Professors"]), 2)

    def test_limit_accepts_numeric_strings(self):
        self.assertEqual(len(self.store.select("Professors", limit="1")), 1)
        with self.assertRaises(StoreError):
            self.store.select("Professors", limit="many")

    def test_calls_are_recorded(self):
        self.store.select("Professors")
        self.store.delete("Professors", 1)
        self.assertEqual(self.store.calls_for("select"), [("select", "Professors")])
        self.assertEqual(self.store.calls_for("delete", "Professors"), [("delete", "Professors")])

    def test_rpc(self):
        self.store.functions["list_tables"] = lambda params: ["Professors"]
        self.assertEqual(self.store.rpc("list_tables"), ["Professors"])
        with self.assertRaises(StoreError):
            self.store.rpc("get_tables")


class SupabaseStoreClientTests(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.store = SupabaseStoreClient(self.client)

    def test_select_builds_query(self):
        query = self.client.table.return_value.select.return_value
        query.order.return_value.limit.return_value.execute.return_value.data = [{"id": 1}]

        rows = self.store.select("Professors", "*", order_by="id", ascending=False, limit=5)

        self.assertEqual(rows, [{"id": 1}])
        self.client.table.assert_called_once_with("Professors")
        self.client.table.return_value.select.assert_called_once_with("*")
        query.order.assert_called_once_with("id", desc=True)
        query.order.return_value.limit.assert_called_once_with(5)

    def test_delete_in_uses_membership_filter(self):
        builder = self.client.table.return_value.delete.return_value
        builder.in_.return_value.execute.return_value.data = None

        self.assertEqual(self.store.delete_in("ITCourses", [1, 2, 3]), [])
        builder.in_.assert_called_once_with("id", [1, 2, 3])

    def test_api_error_becomes_store_error(self):
        builder = self.client.table.return_value.update.return_value
        builder.eq.return_value.execute.side_effect = APIError(
            {"message": 'relation "public.Event" does not exist', "code": "42P01"}
        )

        with self.assertRaises(StoreError) as ctx:
            self.store.update("Event", {"Name": "x"}, 1)
        self.assertEqual(ctx.exception.message, 'relation "public.Event" does not exist')
        self.assertEqual(ctx.exception.code, "42P01")

    def test_rpc_passes_params(self):
        self.client.rpc.return_value.execute.return_value.data = [{"tablename": "x"}]
        self.assertEqual(self.store.rpc("list_tables"), [{"tablename": "x"}])
        self.client.rpc.assert_called_once_with("list_tables", {})


if __name__ == "__main__":
    unittest.main()
