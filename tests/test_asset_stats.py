from assetgen.packing.assets import AssetTableEncoder


def test_stats_counts_and_average():
    enc = AssetTableEncoder()
    enc.add_file("a.PNG", b"\x00" * 3, width=1, height=1)
    enc.add_file("b.png", b"\x00" * 4, width=1, height=1)
    enc.add_file("c.bin", b"\x00" * 4)
    enc.add_file("d.", b"")
    stats = enc.get_stats()
    assert stats == {
        "file_count": 4,
        "total_size": 11,
        "file_types": {"png": 2, "bin": 1, "unknown": 1},
        "average_file_size": 3,  # 2.75 rounds up
    }


def test_stats_of_empty_encoder():
    stats = AssetTableEncoder().get_stats()
    assert stats["file_count"] == 0
    assert stats["average_file_size"] == 0
    assert stats["file_types"] == {}


def test_stats_do_not_mutate():
    enc = AssetTableEncoder()
    enc.add_file("a.bin", b"\x01")
    enc.get_stats()
    enc.get_stats()
    assert len(enc.entries) == 1
