import asyncio
import logging
import os
import time
from datetime import datetime

from . import files
from .assets import AssetCache
from .errors import BuildJoinError, NoSourceFilesError, RavenError
from .highlight import SyntaxHighlighter
from .postprocess import PostProcessor
from .scanner import DirectoryScanner, MARKDOWN, HTML_TEMPLATE_SOURCE, STYLESHEET
from .template import TemplateIntegrator
from .transform import MarkdownTransformer

BUILT = 'built'
SKIPPED = 'skipped'
FAILED = 'failed'


class InfoFilter(logging.Filter):
    """Filter to allow warnings, errors and selected INFO messages in the console."""
    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        allowed_messages = [
            "Build completed in",
            "Total pages built:",
            "Total pages skipped:",
            "Total pages failed:",
            "Cleaned",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


def setup_logging(log_dir=None):
    """Set up the Raven logger: filtered console output plus a DEBUG log file under ``log_dir``."""
    logger = logging.getLogger('Raven')
    logger.setLevel(logging.DEBUG)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.addFilter(InfoFilter())
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            log_filename = datetime.now().strftime('raven_%Y-%m-%d_%H-%M-%S.log')
            file_handler = logging.FileHandler(os.path.join(log_dir, log_filename))
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(file_handler)
    return logger


def needs_rebuild(source_path, dest_path, force_rebuild=False):
    """Whether ``dest_path`` must be regenerated from ``source_path``.

    Skips only when not forced and the destination is at least as new as the source.
    """
    if force_rebuild:
        return True
    try:
        dest_mtime = os.stat(dest_path).st_mtime_ns
    except FileNotFoundError:
        return True
    return dest_mtime < os.stat(source_path).st_mtime_ns


class UnitResult:
    """Outcome of building one source file."""

    def __init__(self, source_file, dest_path, status, error=None):
        self.source_file = source_file
        self.dest_path = dest_path
        self.status = status
        self.error = error

    @property
    def ok(self):
        return self.status != FAILED

    def __repr__(self):
        return f"UnitResult({self.source_file.path!r}, {self.status!r})"


class BuildReport:
    """Aggregate of every unit's result for one build run."""

    def __init__(self, results, elapsed=0.0):
        self.results = list(results)
        self.elapsed = elapsed

    def _with_status(self, status):
        return [result for result in self.results if result.status == status]

    @property
    def built(self):
        return self._with_status(BUILT)

    @property
    def skipped(self):
        return self._with_status(SKIPPED)

    @property
    def failed(self):
        return self._with_status(FAILED)

    @property
    def ok(self):
        return not self.failed


class FileProcessor:
    """Builds a single source file into its destination."""

    def __init__(self, config, transformer, integrator, postprocessor):
        self.config = config
        self.transformer = transformer
        self.integrator = integrator
        self.postprocessor = postprocessor
        self.logger = logging.getLogger('Raven.FileProcessor')

    def destination_for(self, source_file):
        """Mirror the file's place under the source root into the dest root."""
        source_dir = self.config.source_dir
        relative = os.path.relpath(os.path.abspath(source_file.path), source_dir)
        if relative.startswith(os.pardir):
            relative = os.path.basename(source_file.path)
        if source_file.kind == MARKDOWN:
            relative = os.path.splitext(relative)[0] + '.html'
        return os.path.join(self.config.dest_dir, relative)

    async def build_markdown(self, source_path, dest_path):
        source = await files.read_text(source_path)
        body_html, page_info = self.transformer.parse(source, source_path)
        html = await self.integrator.integrate(page_info, source_path, body_html)
        html = self.postprocessor.minify(html, source_path)
        await files.write_text(dest_path, html)

    async def build_html(self, source_path, dest_path):
        if not self.config.treat_source_as_template:
            await files.copy_file(source_path, dest_path)
            return
        source = await files.read_text(source_path)
        html = await self.integrator.integrate_source_template(source)
        html = self.postprocessor.minify(html, source_path)
        await files.write_text(dest_path, html)

    async def process(self, source_file, force_rebuild=False):
        """Build one file. Errors are logged and returned, never raised."""
        dest_path = self.destination_for(source_file)
        try:
            if source_file.kind == MARKDOWN:
                if not needs_rebuild(source_file.path, dest_path, force_rebuild):
                    self.logger.debug(f"Up to date, skipping: {source_file.path}")
                    return UnitResult(source_file, dest_path, SKIPPED)
                await self.build_markdown(source_file.path, dest_path)
            elif source_file.kind == HTML_TEMPLATE_SOURCE:
                await self.build_html(source_file.path, dest_path)
            elif source_file.kind == STYLESHEET:
                await files.copy_file(source_file.path, dest_path)
            else:
                return UnitResult(source_file, dest_path, SKIPPED)
        except RavenError as e:
            self.logger.error(str(e))
            return UnitResult(source_file, dest_path, FAILED, e)
        except Exception as e:
            self.logger.error(f"Unexpected error processing {source_file.path}: {e}")
            return UnitResult(source_file, dest_path, FAILED, e)

        self.logger.debug(f"Generated: {dest_path}")
        return UnitResult(source_file, dest_path, BUILT)


class Raven:
    """Builds every page of a project concurrently."""

    def __init__(self, config, highlighter=None, assets=None, progress_callback=None):
        self.config = config
        self.logger = logging.getLogger('Raven')
        # loading syntaxes and themes happens before any unit runs; failures abort the build
        self.highlighter = highlighter or SyntaxHighlighter.from_config(config)
        self.assets = assets if assets is not None else AssetCache()
        self.progress_callback = progress_callback
        self.processor = FileProcessor(
            config,
            MarkdownTransformer(self.highlighter),
            TemplateIntegrator(config, self.assets),
            PostProcessor(enabled=config.minify),
        )
        self.completed = 0
        self.total = 0

    def discover(self):
        """Scan the configured source directory."""
        return DirectoryScanner().collect(self.config.source_dir)

    def _unit_done(self, result):
        # only successful units advance the visible counter
        if result.ok:
            self.completed += 1
            if self.progress_callback:
                self.progress_callback(self.completed, self.total)

    async def _run_unit(self, source_file, force_rebuild):
        result = await self.processor.process(source_file, force_rebuild)
        self._unit_done(result)
        return result

    async def build(self, source_files, force_rebuild=False):
        """Build every file in ``source_files`` and wait for all of them.

        Raises:
            NoSourceFilesError: if there is no markdown file to build
            BuildJoinError: if the units could not be joined
        """
        source_files = list(source_files)
        if not any(source_file.kind == MARKDOWN for source_file in source_files):
            raise NoSourceFilesError(self.config.source_dir)

        self.completed = 0
        self.total = len(source_files)
        start = time.perf_counter()
        try:
            results = await asyncio.gather(
                *(self._run_unit(source_file, force_rebuild) for source_file in source_files)
            )
        except Exception as e:
            raise BuildJoinError(e) from e
        return BuildReport(results, time.perf_counter() - start)

    def run(self, force_rebuild=False):
        """Discover sources, build them and log a summary."""
        report = asyncio.run(self.build(self.discover(), force_rebuild))
        self.logger.info(f"Build completed in {report.elapsed:.6f} seconds.")
        self.logger.info(f"Total pages built: {len(report.built)}")
        self.logger.info(f"Total pages skipped: {len(report.skipped)}")
        if report.failed:
            self.logger.info(f"Total pages failed: {len(report.failed)}")
        return report
