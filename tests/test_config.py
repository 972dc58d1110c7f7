"""
Tests for pipeline configuration.
"""

import pytest

from genome_window_stats.config import Config
from genome_window_stats.exceptions import ConfigError, InputError
from genome_window_stats.utils.file_utils import check_fasta_input, ensure_directory


class TestConfig:
    """Test validation in Config."""

    def test_defaults(self, write_fasta):
        fasta = write_fasta([("chr1", "ACGT")])
        config = Config(fasta=fasta)
        assert config.ref_fasta == fasta
        assert config.fields == ["GC"]
        assert config.window_size == config.window_stride == 100

    def test_creates_output_directory(self, write_fasta, tmp_path):
        fasta = write_fasta([("chr1", "ACGT")])
        Config(fasta=fasta, output=str(tmp_path / "nested" / "out.tsv"))
        assert (tmp_path / "nested").is_dir()

    def test_missing_fasta(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config(fasta=str(tmp_path / "missing.fa"))

    def test_missing_reference(self, write_fasta, tmp_path):
        fasta = write_fasta([("chr1", "ACGT")])
        with pytest.raises(FileNotFoundError):
            Config(fasta=fasta, ref_fasta=str(tmp_path / "missing.fa"))

    @pytest.mark.parametrize("field", ["window_size", "window_stride", "chunk_size", "buffer_size"])
    def test_non_positive_sizes(self, write_fasta, field):
        fasta = write_fasta([("chr1", "ACGT")])
        with pytest.raises(ConfigError):
            Config(fasta=fasta, **{field: 0})

    def test_unknown_distance_metric(self, write_fasta):
        fasta = write_fasta([("chr1", "ACGT")])
        with pytest.raises(ConfigError):
            Config(fasta=fasta, dist_metric="cosine")

    def test_no_fields(self, write_fasta):
        fasta = write_fasta([("chr1", "ACGT")])
        with pytest.raises(ConfigError):
            Config(fasta=fasta, fields=[])


class TestFileUtils:
    """Test input checks."""

    def test_check_fasta_input(self, write_fasta):
        assert check_fasta_input(write_fasta([("chr1", "ACGT")])) is True

    def test_missing_fasta(self, tmp_path):
        with pytest.raises(InputError):
            check_fasta_input(str(tmp_path / "missing.fa"))

    def test_ensure_directory(self, tmp_path):
        path = ensure_directory(tmp_path / "a" / "b")
        assert path.is_dir()
