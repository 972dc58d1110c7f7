"""
Tests for computing window statistics from chunks.
"""

import pytest

from genome_window_stats.exceptions import MetricError, ReferenceProfileError
from genome_window_stats.kmer import KmerProfile
from genome_window_stats.metrics import MetricRegistry, default_registry
from genome_window_stats.pipeline.chunker import Chunk, split_record
from genome_window_stats.pipeline.consumer import (
    ChunkResult,
    classify_metrics,
    compute_chunk,
    consume_chunks,
    parse_kmer_field,
    required_kmer_sizes
)
from genome_window_stats.pipeline.reader import SequenceRecord
from genome_window_stats.pipeline.stream import AbortSignal


@pytest.fixture
def ref_profiles():
    return {3: KmerProfile(3).count("CCTAAA").counts_to_freqs()}


@pytest.fixture
def chunk():
    # Two windows of 4 bp: "CCTA" and "GGGC"
    return Chunk(id="chr1", bp_start=11, bp_end=18, w_size=4, w_stride=4,
                 seq="CCTAGGGC", starts=[0, 4])


class TestClassifyMetrics:
    """Test resolving metric names before processing."""

    def test_parse_kmer_field(self):
        assert parse_kmer_field("4MER") == 4
        assert parse_kmer_field("12MER") == 12
        assert parse_kmer_field("4mer") is None
        assert parse_kmer_field("MER") is None
        assert parse_kmer_field("4MERS") is None

    def test_registry_and_kmer_columns(self, ref_profiles):
        plan = classify_metrics(["GC", "3MER", "GCSKEW"], ref_profiles=ref_profiles)
        assert plan.header == ["chrom", "start", "end", "GC", "3MER", "GCSKEW"]
        assert set(plan.metric_cols) == {3, 5}
        assert plan.kmer_cols == {4: ref_profiles[3]}

    def test_unknown_metric(self, ref_profiles):
        with pytest.raises(MetricError, match="FOO"):
            classify_metrics(["GC", "FOO"], ref_profiles=ref_profiles)

    def test_kmer_suffix_is_case_sensitive(self, ref_profiles):
        with pytest.raises(MetricError):
            classify_metrics(["3mer"], ref_profiles=ref_profiles)

    def test_missing_reference_profile(self, ref_profiles):
        with pytest.raises(ReferenceProfileError):
            classify_metrics(["4MER"], ref_profiles=ref_profiles)

    def test_zero_k(self, ref_profiles):
        with pytest.raises(MetricError):
            classify_metrics(["0MER"], ref_profiles=ref_profiles)

    def test_custom_registry(self):
        registry = MetricRegistry({"LEN": lambda seq: float(len(seq))})
        plan = classify_metrics(["LEN"], registry=registry)
        assert list(plan.metric_cols) == [3]
        with pytest.raises(MetricError):
            classify_metrics(["GC"], registry=registry)

    def test_required_kmer_sizes(self):
        assert required_kmer_sizes(["GC", "4MER", "2MER", "4MER"]) == (4, 2)
        assert required_kmer_sizes(["GC", "ENTRO"]) == ()

    def test_reference_built_for_other_k(self, ref_profiles):
        with pytest.raises(ReferenceProfileError, match="3-mers"):
            classify_metrics(["4MER"], ref_profiles={4: ref_profiles[3]})

    def test_reference_not_normalized(self):
        counts = KmerProfile(3).count("CCTAAA")
        with pytest.raises(ReferenceProfileError, match="not normalized"):
            classify_metrics(["3MER"], ref_profiles={3: counts})

    def test_required_kmer_sizes_rejects_unknown_names(self):
        with pytest.raises(MetricError, match="FOO"):
            required_kmer_sizes(["FOO", "4MER"])
        with pytest.raises(MetricError):
            required_kmer_sizes(["0MER"])


class TestComputeChunk:
    """Test the result table of one chunk."""

    def test_coordinates(self, chunk):
        result = compute_chunk(chunk, classify_metrics(["GC"]))
        assert isinstance(result, ChunkResult)
        assert len(result) == 2
        assert [row[:3] for row in result.data] == [["chr1", "11", "14"], ["chr1", "15", "18"]]

    def test_metric_values_are_text(self, chunk, ref_profiles):
        plan = classify_metrics(["GC", "GCSKEW", "3MER"], ref_profiles=ref_profiles)
        result = compute_chunk(chunk, plan)
        assert result.header == ["chrom", "start", "end", "GC", "GCSKEW", "3MER"]
        assert result.data[0][3:] == ["0.500000", "-1.000000", "0.500000"]
        assert result.data[1][3:5] == ["1.000000", "0.500000"]
        assert 0.0 <= float(result.data[1][5]) <= 1.0

    def test_nan_values(self):
        chunk = Chunk(id="chrN", bp_start=1, bp_end=4, w_size=4, w_stride=4, seq="ATAT", starts=[0])
        result = compute_chunk(chunk, classify_metrics(["GCSKEW"]))
        assert result.data[0][3] == "nan"

    def test_to_frame(self, chunk):
        df = compute_chunk(chunk, classify_metrics(["GC"])).to_frame()
        assert list(df.columns) == ["chrom", "start", "end", "GC"]
        assert df["start"].tolist() == ["11", "15"]


class TestConsumeChunks:
    """Test the window consumer stage."""

    def test_results_in_chunk_order(self, random_sequence):
        record = SequenceRecord("chr1", random_sequence(200))
        chunks = list(split_record(record, 20, 10, 4))
        results = list(consume_chunks(chunks, ["GC", "ENTRO"], buf_size=1))
        assert len(results) == len(chunks)
        starts = [int(row[1]) for result in results for row in result.data]
        assert starts == list(range(1, 182, 10))

    def test_unknown_metric_detected_before_processing(self):
        pulled = []

        def chunks():
            pulled.append(True)
            yield Chunk(id="chr1", bp_start=1, bp_end=4, w_size=4, w_stride=4, seq="ACGT", starts=[0])

        with pytest.raises(MetricError):
            consume_chunks(chunks(), ["GC", "NOPE"])
        assert pulled == []

    def test_config_error_aborts_upstream(self):
        signal = AbortSignal()
        with pytest.raises(ReferenceProfileError):
            consume_chunks([], ["5MER"], ref_profiles={}, signal=signal)
        assert isinstance(signal.error, ReferenceProfileError)

    def test_uses_default_registry(self):
        assert "GC" in default_registry()
        chunk = Chunk(id="c", bp_start=1, bp_end=4, w_size=4, w_stride=4, seq="GGCC", starts=[0])
        results = list(consume_chunks([chunk], ["GC"]))
        assert results[0].data == [["c", "1", "4", "1.000000"]]
