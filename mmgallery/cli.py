"""
Command Line Interface for the gallery.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .aggregator import Aggregator
from .config import GalleryConfig
from .errors import GalleryError, NotFoundError
from .reporter import Reporter


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    
    logging.getLogger('PIL').setLevel(logging.WARNING)
    
    return logging.getLogger('mmgallery')


def get_config(args: argparse.Namespace) -> GalleryConfig:
    """Get configuration from environment and CLI overrides."""
    config = GalleryConfig.from_env()
    
    if getattr(args, 'dir', None):
        config.base_dir = args.dir
    if getattr(args, 'port', None):
        config.port = args.port
    if getattr(args, 'host', None):
        config.host = args.host
    if getattr(args, 'static_dir', None):
        config.static_dir = args.static_dir
    if getattr(args, 'debug', False):
        config.debug = True
    if getattr(args, 'verbose', False):
        config.log_level = 'DEBUG'
    
    return config


def cmd_serve(args: argparse.Namespace) -> int:
    """Execute serve command."""
    config = get_config(args)
    errors = config.validate()
    if errors:
        logger = setup_logging(args.verbose)
        for error in errors:
            logger.error(error)
        return 1
    
    from .server import run_server
    
    try:
        run_server(config)
    except KeyboardInterrupt:
        return 130
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Execute show command."""
    logger = setup_logging(args.verbose)
    config = get_config(args)
    
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1
    
    aggregator = Aggregator(config.base_dir, link_prefix=config.link_prefix, logger=logger)
    reporter = Reporter()
    
    try:
        if args.week is not None:
            reporter.report_period(aggregator.aggregate_one(args.week))
        elif args.creator:
            periods = aggregator.aggregate_by_creator(args.creator)
            reporter.report_detailed([p for p in periods if p.entries])
        elif args.detailed:
            reporter.report_detailed(aggregator.aggregate_all())
        else:
            reporter.report_summary(aggregator.aggregate_all())
    except NotFoundError as e:
        logger.error(str(e))
        return 1
    except GalleryError as e:
        logger.exception(f"Aggregation failed: {e}")
        return 1
    
    for name in aggregator.skipped_folders:
        logger.warning(f"Skipped folder: {name}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='mmgallery',
        description='Weekly image gallery with lock-driven voting',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Folder layout:
  <dir>/CW_<n>/*.jpg|jpeg|gif|png   submissions for week n
  <dir>/CW_<n>/upload.lock          submissions closed, voting open
  <dir>/CW_<n>/vote.lock            voting closed, results shown
  <dir>/CW_<n>/votes.txt            ballots, one per line: voter:choice:choice...

Examples:
  python -m mmgallery serve --dir /srv/maimai --port 8080
  python -m mmgallery show --dir /srv/maimai --week 42
"""
    )
    
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    
    subparsers = parser.add_subparsers(dest='command', help='Command to run')
    
    serve_parser = subparsers.add_parser('serve', help='Run the web gallery')
    serve_parser.add_argument('-d', '--dir', help='The gallery directory (overrides MMGALLERY_DIR)')
    serve_parser.add_argument('-p', '--port', type=int, help='Port to run on (default: 8080)')
    serve_parser.add_argument('--host', help='Interface to bind (default: 0.0.0.0)')
    serve_parser.add_argument('--static-dir', help='Directory with static assets')
    serve_parser.add_argument('--debug', action='store_true', help='Enable debug mode and reloader')
    serve_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    
    show_parser = subparsers.add_parser('show', help='Print the aggregated gallery')
    show_parser.add_argument('-d', '--dir', help='The gallery directory (overrides MMGALLERY_DIR)')
    group = show_parser.add_mutually_exclusive_group()
    group.add_argument('-w', '--week', type=int, metavar='N', help='Show only week N')
    group.add_argument('-c', '--creator', help='Show only entries of one creator')
    group.add_argument('--detailed', action='store_true', help='List every entry and result')
    show_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    
    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    
    if not parsed_args.command:
        parser.print_help()
        return 1
    
    if parsed_args.command == 'serve':
        return cmd_serve(parsed_args)
    elif parsed_args.command == 'show':
        return cmd_show(parsed_args)
    
    return 1


if __name__ == '__main__':
    sys.exit(main())
