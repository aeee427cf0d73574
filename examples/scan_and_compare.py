"""
Scan and Compare Example

Scans a page twice and reports what changed between the two models.
"""
import asyncio
import json

from pagelens.core.browser.playwright_driver import launch_driver
from pagelens.core.dom.scanner import PageScanner
from pagelens.core.logging_config import configure_logging
from pagelens.core.models.config import Config
from pagelens.core.versioning.compatibility import (
    CompatibilityAnalyzer,
    MigrationNoteGenerator,
    increment_version,
)
from pagelens.core.versioning.differ import ModelDiffer

URL = "https://example.com"


async def main():
    config = Config()
    configure_logging(config.logs)

    scanner = PageScanner(config.scanner)

    async with launch_driver() as driver:
        await driver.goto(URL, timeout=config.auth.navigation_timeout)
        before = await scanner.scan(driver)

        # Reload to simulate a later visit
        await driver.goto(URL, timeout=config.auth.navigation_timeout)
        after = await scanner.scan(driver)

    print(json.dumps(after.to_dict(), indent=2)[:2000])

    diff = ModelDiffer().diff(before, after)
    report = CompatibilityAnalyzer().analyze(diff)
    notes = MigrationNoteGenerator().generate(diff, report)

    print(f"Added: {len(diff.added)}, removed: {len(diff.removed)}, modified: {len(diff.modified)}")
    print(f"Effort: {report.estimated_effort.value}")

    if report.migration_required:
        script = MigrationNoteGenerator().render_script("v1.0.0", increment_version("1.0.0"), report, notes)
        print(script)


if __name__ == "__main__":
    asyncio.run(main())
