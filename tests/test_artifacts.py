"""Tests for artifact naming and removal"""

from dbdump.backup import ArtifactNamer, ConnectionSpec, EngineKind, remove_artifact


class FixedClock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestArtifactNamer:
    """Tests for collision-free artifact names"""

    def test_postgres_name(self, tmp_path, pg_spec):
        namer = ArtifactNamer(tmp_path, clock=FixedClock(1700000000.7))
        assert namer.next_path(pg_spec) == tmp_path / "app_1700000000.pgdump"

    def test_mysql_name(self, tmp_path, mysql_spec):
        namer = ArtifactNamer(tmp_path, clock=FixedClock(1700000000))
        assert namer.next_path(mysql_spec) == tmp_path / "shop_1700000000.sql"

    def test_different_timestamps_never_collide(self, tmp_path, pg_spec):
        clock = FixedClock(1700000000)
        namer = ArtifactNamer(tmp_path, clock=clock)

        first = namer.next_path(pg_spec)
        clock.now += 1
        second = namer.next_path(pg_spec)

        assert first != second
        assert second.name == "app_1700000001.pgdump"

    def test_same_second_gets_disambiguator(self, tmp_path, pg_spec):
        namer = ArtifactNamer(tmp_path, clock=FixedClock(1700000000))

        names = [namer.next_path(pg_spec).name for _ in range(3)]

        assert names == [
            "app_1700000000.pgdump",
            "app_1700000000-1.pgdump",
            "app_1700000000-2.pgdump",
        ]

    def test_existing_file_on_disk_is_skipped(self, tmp_path, pg_spec):
        (tmp_path / "app_1700000000.pgdump").write_bytes(b"left behind")
        namer = ArtifactNamer(tmp_path, clock=FixedClock(1700000000))

        assert namer.next_path(pg_spec).name == "app_1700000000-1.pgdump"

    def test_existing_compressed_file_is_skipped(self, tmp_path, pg_spec):
        (tmp_path / "app_1700000000.pgdump.zst").write_bytes(b"left behind")
        namer = ArtifactNamer(tmp_path, clock=FixedClock(1700000000))

        assert namer.next_path(pg_spec).name == "app_1700000000-1.pgdump"

    def test_targets_with_same_name_on_different_engines(self, tmp_path):
        namer = ArtifactNamer(tmp_path, clock=FixedClock(1700000000))
        pg = ConnectionSpec(EngineKind.POSTGRES, "db1", database="app")
        my = ConnectionSpec(EngineKind.MYSQL, "db2", database="app")

        assert namer.next_path(pg).name == "app_1700000000.pgdump"
        assert namer.next_path(my).name == "app_1700000000.sql"

    def test_issued_names_pruned_when_second_changes(self, tmp_path, pg_spec, mysql_spec):
        clock = FixedClock(1700000000)
        namer = ArtifactNamer(tmp_path, clock=clock)

        for _ in range(100):
            namer.next_path(pg_spec)
            namer.next_path(mysql_spec)
            clock.now += 1
        namer.next_path(pg_spec)

        assert namer._issued == {"app_1700000100.pgdump"}

    def test_next_path_starts_from_base_name(self, tmp_path, pg_spec):
        namer = ArtifactNamer(tmp_path, clock=FixedClock(1700000000))

        assert namer.next_path(pg_spec).name == namer.base_name(pg_spec)

    def test_base_name(self, tmp_path, pg_spec):
        namer = ArtifactNamer(tmp_path)
        assert namer.base_name(pg_spec, timestamp=1700000000) == "app_1700000000.pgdump"


class TestRemoveArtifact:
    """Tests for idempotent artifact removal"""

    def test_removes_file(self, tmp_path, logger):
        path = tmp_path / "app_1.pgdump.zst"
        path.write_bytes(b"x")

        assert remove_artifact(path, logger) is True
        assert not path.exists()

    def test_missing_file_is_warning_not_error(self, tmp_path, logger):
        path = tmp_path / "gone.pgdump.zst"

        assert remove_artifact(path, logger) is False
        assert remove_artifact(path, logger) is False
        assert logger.messages("WARNING") == ["Artifact already removed", "Artifact already removed"]

    def test_missing_file_without_logger(self, tmp_path):
        assert remove_artifact(tmp_path / "gone", None) is False
