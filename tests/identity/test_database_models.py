import unittest

from sqlalchemy import CheckConstraint
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable

from profilevault_common.base_api_view import PRINCIPAL_MAX_LENGTH
from services.identity.database import (AdminCapability, AvatarAsset, Base,
                                        CapabilityBootstrap, IdentityEvent,
                                        Profile, Session, SessionStore)


def check_names(model):
    return {c.name for c in model.__table__.constraints
            if isinstance(c, CheckConstraint)}


class TestSchema(unittest.TestCase):
    def test_all_tables_declared(self):
        self.assertEqual(set(Base.metadata.tables),
                         {"profiles", "avatar_assets", "session_stores",
                          "sessions", "admin_capabilities",
                          "capability_bootstrap", "identity_events"})

    def test_profile_single_avatar_constraint(self):
        self.assertIn("ck_profiles_single_avatar", check_names(Profile))
        self.assertIn("ck_profiles_membership_tier", check_names(Profile))

    def test_profile_timestamps_from_mixin(self):
        columns = Profile.__table__.columns
        self.assertFalse(columns["created_at"].nullable)
        self.assertFalse(columns["updated_at"].nullable)
        self.assertIn("created_at", SessionStore.__table__.columns)

    def test_session_primary_key_is_store_and_key(self):
        pk = [c.name for c in Session.__table__.primary_key.columns]
        self.assertEqual(pk, ["store_id", "session_pubkey"])

    def test_principal_columns_match_header_limit(self):
        for column in (Profile.__table__.c.owner,
                       SessionStore.__table__.c.owner,
                       AdminCapability.__table__.c.holder,
                       AdminCapability.__table__.c.issuer,
                       IdentityEvent.__table__.c.principal):
            self.assertEqual(column.type.length, PRINCIPAL_MAX_LENGTH)

    def test_sessions_cascade_with_store(self):
        fk = next(iter(Session.__table__.c.store_id.foreign_keys))
        self.assertEqual(fk.ondelete, "CASCADE")

    def test_avatar_asset_survives_profile(self):
        fk = next(iter(AvatarAsset.__table__.c.profile_id.foreign_keys))
        self.assertEqual(fk.ondelete, "SET NULL")

    def test_bootstrap_single_row(self):
        self.assertIn("ck_capability_bootstrap_single_row",
                      check_names(CapabilityBootstrap))
        fk = next(iter(CapabilityBootstrap.__table__.c.capability_id
                       .foreign_keys))
        self.assertEqual(fk.column.table, AdminCapability.__table__)

    def test_event_id_unique(self):
        self.assertTrue(IdentityEvent.__table__.c.event_id.unique)

    def test_tables_compile_for_postgresql(self):
        for table in Base.metadata.sorted_tables:
            ddl = str(CreateTable(table).compile(
                dialect=postgresql.dialect()))
            self.assertIn(table.name, ddl)


if __name__ == "__main__":
    unittest.main()
