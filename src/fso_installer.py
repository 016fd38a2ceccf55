"""
FreeSpace Open Installer - Entry point
Runs the configuration-page validation from the command line.
"""

import argparse
import logging
import sys

from core import (
    INSTALLER_TITLE,
    INSTALLER_VERSION,
    LOG_FILE,
    InstallationOrchestrator,
    SettingsStore,
    UserProperties,
)
from core.config_manager import ConfigManager
from core.mod_node import render_tree
from model_types import OutcomeStatus
from utils.error_messages import get_user_friendly_error
from utils.log import InstallerLog
from utils.symbols import LogSymbols


EXIT_CODES = {
    OutcomeStatus.SUCCESS: 0,
    OutcomeStatus.FAILED: 1,
    OutcomeStatus.DECLINED: 2,
    OutcomeStatus.CANCELLED: 130,
    OutcomeStatus.EXIT: 0,
}


def console_prompt(title, message):
    """Yes/no question on the terminal."""
    print(f"\n[{title}]\n{message}")
    while True:
        try:
            answer = input("[y/n] > ").strip().lower()
        except EOFError:
            return False
        if answer in ('y', 'yes'):
            return True
        if answer in ('n', 'no'):
            return False


def build_parser():
    parser = argparse.ArgumentParser(description=f"{INSTALLER_TITLE} {INSTALLER_VERSION}")
    parser.add_argument('--dir', dest='directory', help="Installation directory")
    parser.add_argument('--proxy-host', help="Proxy host (enables the proxy together with --proxy-port)")
    parser.add_argument('--proxy-port', help="Proxy port")
    parser.add_argument('--no-proxy', action='store_true', help="Connect directly, ignoring the saved proxy")
    parser.add_argument('--config', help="Installation profile JSON file")
    parser.add_argument('--debug', action='store_true', help="Log debug messages")
    return parser


def main(argv=None):
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)
    
    log_level = 'DEBUG' if args.debug else 'INFO'
    logging.basicConfig(
        filename=str(LOG_FILE),
        level=logging.DEBUG if args.debug else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )
    log = InstallerLog(LOG_FILE, log_level=log_level)
    
    profile = ConfigManager(log, args.config).load_profile()
    properties = UserProperties(log_callback=log).load()
    
    directory = args.directory or properties.application_dir or profile.default_dir
    # the saved proxy applies only when none is given on the command line
    proxy = None if args.no_proxy or args.proxy_host or args.proxy_port else properties.proxy
    using_proxy = not args.no_proxy and (bool(args.proxy_host or args.proxy_port) or proxy is not None)
    host = args.proxy_host or (proxy.host if proxy else None)
    port = args.proxy_port or (proxy.port if proxy else None)
    
    orchestrator = InstallationOrchestrator(
        SettingsStore(), properties, profile,
        log_callback=log, prompt_callback=console_prompt,
    )
    
    log(f"{INSTALLER_TITLE} {INSTALLER_VERSION}")
    log(f"Installation directory: {directory}")
    outcome = orchestrator.prepare_to_leave(directory, using_proxy, host, port)
    
    if outcome.status == OutcomeStatus.SUCCESS:
        nodes = orchestrator.settings.get('mod_nodes') or []
        log(f"\n{LogSymbols.SUCCESS} {len(nodes)} mod(s) available:")
        log(render_tree(nodes, properties.installed_versions()))
        basic_config = orchestrator.settings.get('basic_config_mods')
        if basic_config:
            log(f"\nBasic configuration: {', '.join(basic_config)}", info=True)
    elif outcome.status == OutcomeStatus.CANCELLED:
        log(get_user_friendly_error('cancelled'), warning=True)
    elif outcome.status == OutcomeStatus.FAILED:
        log(outcome.message or get_user_friendly_error(outcome.error_kind), error=True)
    elif outcome.status == OutcomeStatus.EXIT:
        log("Opening the download page for the new installer version.", info=True)
    
    return EXIT_CODES.get(outcome.status, 1)


if __name__ == "__main__":
    sys.exit(main())
