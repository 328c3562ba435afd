"""
Command Line Interface for upload thumbnails.
"""

import argparse
import logging
import os
from typing import List, Optional

from .config import ThumbConfig
from .errors import ThumbnailError
from .generation_progress import GenerationProgress
from .generator import ThumbnailManager


CONFIG_ENV = 'UPLOADTHUMBS_CONFIG'


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('uploadthumbs')


def load_config(args: argparse.Namespace, logger: logging.Logger) -> Optional[ThumbConfig]:
    """Load and validate the configuration file, logging any problems."""
    config_path = args.config or os.environ.get(CONFIG_ENV)
    if not config_path:
        logger.error(f"No configuration file: use --config or set {CONFIG_ENV}")
        return None

    try:
        config = ThumbConfig.load(config_path)
    except FileNotFoundError:
        logger.error(f"Config not found: {config_path}")
        return None
    except (ValueError, ThumbnailError) as e:
        logger.error(f"Failed to load config: {e}")
        return None

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return None
    return config


def build_owner(args: argparse.Namespace, config: ThumbConfig) -> dict:
    """Build the record the templates and attribute are resolved against."""
    owner = {'id': args.id}
    owner[config.attribute] = getattr(args, 'file', None)
    return owner


def cmd_generate(args: argparse.Namespace) -> int:
    """Execute generate command."""
    logger = setup_logging(args.verbose)
    config = load_config(args, logger)
    if config is None:
        return 1

    progress = None
    if not args.quiet:
        progress = GenerationProgress(show_profiles=args.show_profiles, logger=logger)

    manager = ThumbnailManager(config, progress=progress, logger=logger)
    owner = build_owner(args, config)

    try:
        stats = manager.after_upload(owner)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except ThumbnailError as e:
        logger.error(f"Generation failed: {e}")
        return 1

    if stats is None:
        logger.warning("Nothing generated (no source file, or thumbnails not created on save)")
        return 0

    if not args.quiet:
        print()
        print(f"Generated: {stats.generated}")
        print(f"Skipped: {stats.skipped}")
        print(f"Time: {stats.elapsed_seconds:.2f}s")
    return 0


def cmd_url(args: argparse.Namespace) -> int:
    """Execute url command."""
    logger = setup_logging(args.verbose)
    config = load_config(args, logger)
    if config is None:
        return 1

    manager = ThumbnailManager(config, logger=logger)
    try:
        url = manager.get_thumb_upload_url(build_owner(args, config), config.attribute, args.profile)
    except ThumbnailError as e:
        logger.error(f"Lookup failed: {e}")
        return 1

    if url is None:
        logger.warning("No image available")
        return 1
    print(url)
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    """Execute delete command."""
    logger = setup_logging(args.verbose)
    config = load_config(args, logger)
    if config is None:
        return 1

    manager = ThumbnailManager(config, logger=logger)
    try:
        removed = manager.delete(build_owner(args, config), config.attribute)
    except (OSError, ThumbnailError) as e:
        logger.error(f"Delete failed: {e}")
        return 1

    logger.info(f"Removed {removed} thumbnails")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Execute status command."""
    logger = setup_logging(args.verbose)
    config = load_config(args, logger)
    if config is None:
        return 1

    manager = ThumbnailManager(config, logger=logger)
    owner = build_owner(args, config)
    try:
        source = manager.upload_manager.get_upload_path(owner, config.attribute)
        artifacts = [
            manager.get_thumb_artifact(owner, config.attribute, profile)
            for profile in config.thumbs
        ]
    except ThumbnailError as e:
        logger.error(f"Status failed: {e}")
        return 1

    source_state = "EXISTS" if source and os.path.isfile(source) else "MISSING"
    print(f"Source: {source} - {source_state}")
    for artifact in artifacts:
        if artifact is not None:
            print(f"  {artifact.profile}: {artifact.format_status()}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='uploadthumbs',
        description='Thumbnail generation for uploaded images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  python -m uploadthumbs -c thumbs.json generate --id 42 --file photo.jpg
  python -m uploadthumbs -c thumbs.json url --id 42 --file photo.jpg -p preview
  python -m uploadthumbs -c thumbs.json delete --id 42 --file photo.jpg

The config file may also be given with the {CONFIG_ENV} environment variable.
"""
    )

    parser.add_argument('-c', '--config', help='JSON configuration file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    def add_record_arguments(sub: argparse.ArgumentParser, file_required: bool = True) -> None:
        sub.add_argument('--id', required=True, help='Record id used in path templates')
        sub.add_argument('--file', required=file_required, help='Stored filename of the upload')
        sub.add_argument('-v', '--verbose', action='store_true', default=argparse.SUPPRESS,
                         help='Enable verbose logging')

    gen_parser = subparsers.add_parser('generate', help='Create thumbnails for an uploaded file')
    add_record_arguments(gen_parser)
    gen_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    gen_parser.add_argument('--show-profiles', action='store_true',
                            help='Print each profile as processed with result')

    url_parser = subparsers.add_parser('url', help='Print the URL of a thumbnail')
    add_record_arguments(url_parser, file_required=False)
    url_parser.add_argument('-p', '--profile', default='thumb', help='Profile name (default: thumb)')

    delete_parser = subparsers.add_parser('delete', help='Delete an upload and its thumbnails')
    add_record_arguments(delete_parser)

    status_parser = subparsers.add_parser('status', help='Show thumbnail status for an upload')
    add_record_arguments(status_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'generate':
        return cmd_generate(parsed_args)
    elif parsed_args.command == 'url':
        return cmd_url(parsed_args)
    elif parsed_args.command == 'delete':
        return cmd_delete(parsed_args)
    elif parsed_args.command == 'status':
        return cmd_status(parsed_args)

    return 1
