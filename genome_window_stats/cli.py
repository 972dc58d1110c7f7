import sys
import time
import click
import datetime
from pathlib import Path

import pandas as pd
from tqdm import tqdm

from . import __version__
from .config import Config, DIST_METRICS
from .exceptions import GenomeWindowStatsError, ConfigError
from .kmer.reference import build_reference_profiles
from .pipeline.consumer import COORD_COLUMNS, required_kmer_sizes
from .pipeline.runner import run_pipeline
from .pipeline.stream import AbortSignal
from .pipeline.writer import write_results
from .utils.file_utils import check_fasta_input
from .utils.logging_utils import (
    get_logger, setup_logging, log_step, get_clean_command,
    log_summary_block, log_all_warnings_and_errors, log_tqdm_summary
)


logger = get_logger(__name__)


def parse_fields(fields: str):
    """Split a comma-separated field list, e.g. "GC,GCSKEW,4MER"."""
    return [f.strip() for f in fields.split(",") if f.strip()]


@click.group()
@click.version_option(__version__, prog_name="gwstats")
def cli():
    """Sliding-window statistics and k-mer divergence along genomes."""
    pass

@cli.command("windows")
@click.option('--fasta', required=True, help='Input FASTA/FASTQ file (can be gzipped)')
@click.option('--out', default='-', show_default=True, help='Output TSV file, "-" for stdout')
@click.option('--fields', default='GC', show_default=True,
              help='Comma-separated statistics: GC, GCSKEW, ATSKEW, ENTRO or <k>MER for k-mer divergence')
@click.option('--window', default=100, type=int, show_default=True, help='Window size in basepairs')
@click.option('--stride', default=100, type=int, show_default=True, help='Step between consecutive windows in basepairs')
@click.option('--chunk-size', default=1000, type=int, show_default=True, help='Number of windows processed per chunk')
@click.option('--ref-fasta', default=None, help='Reference genome for k-mer profiles (default: the input FASTA)')
@click.option('--dist-metric', default='tvd', type=click.Choice(DIST_METRICS), show_default=True,
              help='Distance between window and reference k-mer profiles')
@click.option('--buffer', default=1, type=int, show_default=True, help='Number of records buffered in memory')
@click.option('--log-file', default=None, help='Also write the log to this file')
@click.option('--quiet', is_flag=True, help='Hide progress bars')
def windows(fasta: str, out: str, fields: str, window: int, stride: int, chunk_size: int,
            ref_fasta, dist_metric: str, buffer: int, log_file, quiet: bool):
    """Compute statistics in sliding windows along each sequence."""
    setup_logging(Path(log_file) if log_file else None)
    signal = AbortSignal()
    try:
        logger.info(f"{'Command:':<5}{get_clean_command()}")
        start_time = time.time()
        logger.info(f"Start time: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

        config = Config(fasta=fasta, output=out, fields=parse_fields(fields),
                        window_size=window, window_stride=stride, chunk_size=chunk_size,
                        ref_fasta=ref_fasta, dist_metric=dist_metric, buffer_size=buffer)
        check_fasta_input(config.fasta)

        ks = required_kmer_sizes(config.fields)
        ref_profiles = {}
        if ks:
            log_step("Step 1 Building reference k-mer profiles")
            ref_profiles = build_reference_profiles(config.ref_fasta, ks, progress=not quiet)

        log_step("Step 2 Computing window statistics")
        results = run_pipeline(
            config.fasta, config.fields, ref_profiles,
            win_size=config.window_size, win_stride=config.window_stride,
            chunk_size=config.chunk_size, dist_metric=config.dist_metric,
            buf_size=config.buffer_size, signal=signal,
        )
        with tqdm(desc="Window statistics", unit="chunk", disable=quiet) as pbar:
            def tracked():
                for result in results:
                    pbar.update(1)
                    yield result
            n_rows = write_results(tracked(), config.output, header=COORD_COLUMNS + config.fields)
        if not quiet:
            log_tqdm_summary(pbar, logger)

        stats = {
            "Fields": ", ".join(config.fields),
            "Window size": f"{config.window_size:,} bp",
            "Window stride": f"{config.window_stride:,} bp",
            "Windows written": f"{n_rows:,}",
        }
        log_step("Summary")
        log_summary_block(
            cmd=get_clean_command(),
            start=start_time,
            duration=time.time() - start_time,
            stats=stats)
        log_all_warnings_and_errors()
    except KeyboardInterrupt:
        signal.abort()
        logger.warning("Interrupted, stopping pipeline")
        raise click.Abort()
    except (GenomeWindowStatsError, FileNotFoundError) as e:
        signal.abort(e)
        logger.error(f"Error in windows: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()


@cli.command("profile")
@click.option('--fasta', required=True, help='Input FASTA/FASTQ file (can be gzipped)')
@click.option('--k', 'k', default=4, type=int, show_default=True, help='k-mer size')
@click.option('--out', default='-', show_default=True, help='Output TSV file, "-" for stdout')
@click.option('--log-file', default=None, help='Also write the log to this file')
def profile(fasta: str, k: int, out: str, log_file):
    """Write the canonical k-mer frequency profile of a genome."""
    setup_logging(Path(log_file) if log_file else None)
    try:
        if k < 1:
            raise ConfigError(f"k must be a positive integer, got {k}")
        check_fasta_input(fasta)
        ref = build_reference_profiles(fasta, [k])[k]
        df = pd.DataFrame(sorted(ref.as_kmers().items()), columns=["kmer", "frequency"])
        df.to_csv(sys.stdout if out == "-" else out, sep="\t", index=False)
        logger.info(f"{len(df):,} canonical {k}-mers written")
    except GenomeWindowStatsError as e:
        logger.error(f"Error in profile: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()


def main():
    cli()


if __name__ == "__main__":
    main()
