#!/usr/bin/env python3
"""
Kernel Module Inventory

This script lists the currently loaded kernel modules from /proc/modules and
extracts the .modinfo metadata (license, parameters, aliases, dependencies,
description, authors, vermagic, firmware) of every compressed module installed
under /lib/modules/<release>.
"""

import io
import sys
from contextlib import redirect_stdout

from kernel_modinfo import (
    __version__,
    CSVFormatter,
    EnvironmentUnavailable,
    JSONFormatter,
    ModuleDisplay,
    ModuleFilter,
    ModuleSorter,
    ModuleTableUnavailable,
    collect_module_info,
    find_module_paths,
    get_kernel_release,
    parse_proc_modules,
)
from kernel_modinfo.collector import MODULES_ROOT, PROC_MODULES_PATH


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        description="List loaded kernel modules and the metadata of installed module files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 modinventory.py                          # Loaded modules and installed module metadata
  python3 modinventory.py --loaded-only            # Only the loaded-module table
  python3 modinventory.py --files-only --detailed  # Full metadata of every installed module
  python3 modinventory.py --files a.ko.gz b.ko.gz  # Inspect specific module files
  python3 modinventory.py --release 6.1.0-13-amd64 # Inspect another installed kernel

  # Filtering examples
  python3 modinventory.py --filter "snd*"          # Only modules starting with 'snd'
  python3 modinventory.py --license GPL --intree   # In-tree GPL module files
  python3 modinventory.py --errors                 # Module files that could not be read

  # Output format examples
  python3 modinventory.py --json                   # JSON output
  python3 modinventory.py --csv -o modules.csv     # Save CSV to file
        """
    )

    parser.add_argument('--detailed', '-d', action='store_true',
                        help='Show detailed information for each module')
    parser.add_argument('--count', '-c', action='store_true',
                        help='Show only the count of modules')

    # Source options
    source = parser.add_mutually_exclusive_group()
    source.add_argument('--loaded-only', action='store_true',
                        help='Only list loaded modules, do not read module files')
    source.add_argument('--files-only', action='store_true',
                        help='Only read module files, do not list loaded modules')
    parser.add_argument('--files', nargs='+', metavar='PATH',
                        help='Read these module files instead of scanning the module tree')
    parser.add_argument('--root', default=MODULES_ROOT, metavar='DIR',
                        help=f'Module tree root (default: {MODULES_ROOT})')
    parser.add_argument('--release', metavar='RELEASE',
                        help='Kernel release to scan (default: running kernel)')
    parser.add_argument('--proc-modules', default=PROC_MODULES_PATH, metavar='FILE',
                        help=f'Loaded-module table (default: {PROC_MODULES_PATH})')

    # Filtering options
    parser.add_argument('--filter', '-f', type=str, metavar='PATTERN',
                        help='Filter modules by name pattern (supports wildcards)')
    parser.add_argument('--min-size', type=int, metavar='BYTES',
                        help='Show only loaded modules with size >= specified bytes')
    parser.add_argument('--max-size', type=int, metavar='BYTES',
                        help='Show only loaded modules with size <= specified bytes')
    parser.add_argument('--min-refs', type=int, metavar='COUNT',
                        help='Show only loaded modules with reference count >= specified count')
    parser.add_argument('--license', metavar='LICENSE',
                        help='Show only module files with this license')
    parser.add_argument('--intree', action='store_true',
                        help='Show only module files built in the kernel tree')
    parser.add_argument('--errors', action='store_true',
                        help='Show only module files that could not be read')

    # Sorting options
    parser.add_argument('--sort', choices=['name', 'size', 'refs'],
                        default='name', help='Sort loaded modules by specified field (default: name)')
    parser.add_argument('--reverse', '-r', action='store_true',
                        help='Reverse sort order')

    # Output format options
    output = parser.add_mutually_exclusive_group()
    output.add_argument('--json', action='store_true',
                        help='Output in JSON format')
    output.add_argument('--csv', action='store_true',
                        help='Output in CSV format')
    parser.add_argument('--output', '-o', type=str, metavar='FILE',
                        help='Write output to specified file instead of stdout')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Suppress headers and only show module data')
    parser.add_argument('--no-warnings', action='store_true',
                        help='Do not report unrecognized .modinfo records')

    # Information options
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}',
                        help='Show version information')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose output with additional debugging information')
    return parser


def _ignore_record(path, record):
    pass


def main(argv=None):
    """Main function to run the kernel module inventory."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.verbose:
            print("Verbose mode enabled", file=sys.stderr)
            print(f"Arguments: {args}", file=sys.stderr)

        loaded_modules = []
        if not args.files_only:
            try:
                loaded_modules = parse_proc_modules(args.proc_modules)
            except ModuleTableUnavailable as e:
                print(f"Warning: {e}", file=sys.stderr)

        entries = None
        release = args.release or ""
        if not args.loaded_only:
            if args.files:
                paths = args.files
            else:
                try:
                    release = release or get_kernel_release()
                    paths = find_module_paths(release, args.root)
                except EnvironmentUnavailable as e:
                    print(f"Warning: {e}", file=sys.stderr)
                    paths = []
                if args.verbose:
                    print(f"Found {len(paths)} module files for {release}", file=sys.stderr)
            report = _ignore_record if args.no_warnings else None
            entries = collect_module_info(paths, report, args.verbose)

        # Apply filtering
        if any([args.filter, args.min_size, args.max_size, args.min_refs]):
            loaded_modules = ModuleFilter.filter_modules(
                loaded_modules,
                name_pattern=args.filter,
                min_size=args.min_size,
                max_size=args.max_size,
                min_refs=args.min_refs
            )
        if entries is not None:
            entries = ModuleFilter.filter_entries(
                entries,
                name_pattern=args.filter,
                license=args.license,
                intree_only=args.intree,
                failed_only=args.errors
            )
            entries = ModuleSorter.sort_entries(entries, args.reverse)

        # Apply sorting
        loaded_modules = ModuleSorter.sort_modules(loaded_modules, args.sort, args.reverse)

        if args.count:
            if entries is None:
                print(f"Total loaded kernel modules: {len(loaded_modules)}")
            elif args.files_only:
                print(f"Total module files: {len(entries)}")
            else:
                print(f"Total kernel modules: {len(loaded_modules)} loaded, "
                      f"{len(entries)} module files")
            return 0

        if args.json:
            output_content = JSONFormatter().format(loaded_modules, entries, release)
        elif args.csv:
            output_content = CSVFormatter().format(loaded_modules, entries, release)
        else:
            f = io.StringIO()
            with redirect_stdout(f):
                if not args.files_only:
                    ModuleDisplay.display_modules(loaded_modules, args.detailed, args.quiet)
                if entries is not None:
                    if not args.files_only and not args.quiet:
                        print()
                    ModuleDisplay.display_entries(entries, args.detailed, args.quiet)
            output_content = f.getvalue()

        # Write output to file or stdout
        if args.output:
            try:
                with open(args.output, 'w', encoding='utf-8') as f:
                    f.write(output_content)
                if args.verbose:
                    print(f"Output written to {args.output}", file=sys.stderr)
            except OSError as e:
                print(f"Error writing to file {args.output}: {e}", file=sys.stderr)
                return 1
        else:
            print(output_content)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
