import sys

from airgrab import CivitaiClient, load_config
from airgrab.core.pipeline import run_pipeline
from airgrab.core.source import accept_any
from airgrab.misc.progress import transfer_progress


def read_airs(path):
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            if line.strip() and not line.startswith("#"):
                yield line


def main():
    cfg = load_config()
    if len(sys.argv) > 2:
        cfg = cfg.with_directory(sys.argv[2])

    with CivitaiClient(cfg.api_key, host=cfg.api_host, timeout=cfg.timeout) as client:
        report = run_pipeline(
            read_airs(sys.argv[1]),
            client,
            cfg.paths,
            accept=accept_any,          # also take "air:" / "urn:" forms
            progress_factory=transfer_progress,
        )

    for result in report.results:
        status = "OK" if result.ok else f"FAILED at {result.stage.value}: {result.error}"
        print(f"[{status}] {result.resource}")
    print(f"{report.succeeded} downloaded, {report.failed} failed")


if __name__ == "__main__":
    main()
