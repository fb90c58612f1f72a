#!/usr/bin/env python3
"""
Main entry point for the rocksdeps build system
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Any, List

from .builders import BuildOrchestrator
from .config import ConfigLoader
from .errors import BuildError
from .utils import Logger, CommandRunner


class BuildSystem:
    """Main build system class"""

    def __init__(self,
                 root_dir: Optional[Path] = None,
                 install_dir: Optional[Path] = None,
                 jobs: Optional[int] = None,
                 timeout: Optional[float] = None,
                 verbose: bool = False,
                 dry_run: bool = False,
                 log_file: Optional[str] = None,
                 runner: Any = None,
                 logger: Any = None):
        """
        Initialize the build system

        Args:
            root_dir: Project root containing the jemalloc and rocksdb trees
            install_dir: Installation directory (default from configuration)
            jobs: Parallel make jobs per stage
            timeout: Seconds before a single command is killed
            verbose: Enable verbose output
            dry_run: Perform dry run without actual building
            log_file: Also write the full debug log to this file
            runner: Command runner, replaced in tests
            logger: Logger instance
        """
        self.root_dir = Path(root_dir) if root_dir else Path.cwd()
        self.verbose = verbose
        self.dry_run = dry_run
        self.logger = logger or Logger(verbose=verbose, log_file=log_file)

        # A project-local config directory wins over the packaged defaults
        config_dir = self.root_dir / "rocksdeps" / "config"
        if not (config_dir / "dependencies.yaml").exists():
            config_dir = Path(__file__).parent / "config"
        self.config = ConfigLoader(config_dir)

        self.install_dir = Path(install_dir or self.config.get_install_dir())
        jobs = jobs or self.config.get_option("jobs")
        if timeout is None:
            timeout = self.config.get_option("command_timeout")

        self.runner = runner or CommandRunner(
            logger=self.logger,
            timeout=timeout,
            dry_run=dry_run
        )

        self.orchestrator = BuildOrchestrator(
            config=self.config,
            root_dir=self.root_dir,
            install_dir=self.install_dir,
            runner=self.runner,
            logger=self.logger,
            jobs=jobs,
            dry_run=dry_run
        )

    def build_all(self) -> List[Path]:
        """
        Build every dependency in order and collect the archives

        Raises:
            BuildError: on the first failing stage
        """
        build_order = self.config.get_build_order()
        self.logger.info(f"Build order: {' -> '.join(build_order)}")
        return self.orchestrator.run()

    def clean(self) -> None:
        self.logger.info("Cleaning build artifacts...")
        self.orchestrator.clean_all()

    def show_info(self) -> None:
        """Show build system information"""
        from . import __version__

        self.logger.raw(f"\nrocksdeps v{__version__}")
        self.logger.raw("=" * 50)
        self.logger.raw(f"Root Directory: {self.root_dir}")
        self.logger.raw(f"Install Directory: {self.install_dir}")
        self.logger.raw(f"\nBuild order ({len(self.config.get_build_order())}):")
        for name in self.config.get_build_order():
            info = self.orchestrator.get_build_info(name)
            self.logger.raw(f"  - {name:12} {info['build_system']:10} {info['source_dir']}")


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface"""
    parser = argparse.ArgumentParser(
        description="Build jemalloc and a statically linked RocksDB into one install directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                          # Build everything into ./deps
  %(prog)s build --install-dir out  # Build into ./out
  %(prog)s clean                    # Run make clean in the source trees
  %(prog)s info                     # Show configuration
        """
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=["build", "clean", "info"],
        default="build",
        help="Command to execute (default: build)"
    )

    parser.add_argument(
        "--root-dir",
        type=Path,
        help="Directory containing the jemalloc and rocksdb source trees"
    )

    parser.add_argument(
        "--install-dir",
        type=Path,
        help="Installation directory for headers and archives"
    )

    parser.add_argument(
        "--jobs", "-j",
        type=int,
        help="Parallel make jobs per stage (default: CPU count)"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        help="Kill any single command running longer than this many seconds"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Perform dry run without actual building"
    )

    parser.add_argument(
        "--log-file",
        help="Write a debug log of the build to this file"
    )

    args = parser.parse_args(argv)

    try:
        bs = BuildSystem(
            root_dir=args.root_dir,
            install_dir=args.install_dir,
            jobs=args.jobs,
            timeout=args.timeout,
            verbose=args.verbose,
            dry_run=args.dry_run,
            log_file=args.log_file
        )
    except (OSError, ValueError) as e:
        print(f"Error initializing build system: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == "build":
            bs.build_all()
        elif args.command == "clean":
            bs.clean()
        elif args.command == "info":
            bs.show_info()
    except KeyboardInterrupt:
        print("\nBuild interrupted by user", file=sys.stderr)
        return 130
    except BuildError as e:
        bs.logger.error(f"{e.kind} error: {e}")
        return e.exit_status
    except ValueError as e:
        bs.logger.error(f"Configuration error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
