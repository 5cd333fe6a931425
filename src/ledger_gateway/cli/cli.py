# src/ledger_gateway/cli/cli.py
import argparse
import sys
from typing import List, Optional

import uvicorn

from ..api.server import build_pool, create_app
from ..config.gateway_config import GatewayConfig
from ..explorer.network_status import NetworkStatusUpdater
from ..monitoring.logging_config import LogConfig
from ..monitoring.metrics import MetricsCollector
from ..monitoring.supervisor import Supervisor, ThreadEvent

class CLI:
    def __init__(self):
        self.config: Optional[GatewayConfig] = None
        self.server: Optional[uvicorn.Server] = None
        self.failed = False

    def main(self, args: List[str]) -> int:
        parser = self.create_parser()
        args = parser.parse_args(args)

        if not hasattr(args, 'func'):
            parser.print_help()
            return 2

        self.config = GatewayConfig(args.config)
        return args.func(args)

    def create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='Ledger REST gateway')
        parser.add_argument('--config', default='config/gateway.yaml', help='Path to YAML config')
        subparsers = parser.add_subparsers(title='commands', dest='command')

        serve = subparsers.add_parser('serve', help='Run the HTTP gateway')
        serve.add_argument('--host', help='Bind address (overrides api.host)')
        serve.add_argument('--port', type=int, help='Bind port (overrides api.port)')
        serve.set_defaults(func=self.serve)

        status = subparsers.add_parser('status', help='Print the current network status')
        status.set_defaults(func=self.print_status)

        return parser

    def serve(self, args) -> int:
        config = self.config
        if args.host:
            config.update('api.host', args.host)
        if args.port:
            config.update('api.port', args.port)

        LogConfig(
            log_dir=config.get('monitoring.log_dir'),
            level=config.get('monitoring.log_level')
        ).setup_logging()
        metrics = MetricsCollector(port=config.get('monitoring.metrics_port'))
        supervisor = Supervisor(on_failure=self.on_thread_failure)

        app = create_app(config, supervisor=supervisor, metrics=metrics)
        self.server = uvicorn.Server(uvicorn.Config(
            app,
            host=config.get('api.host'),
            port=config.get('api.port'),
            timeout_graceful_shutdown=config.get('api.shutdown_timeout'),
            log_level=config.get('monitoring.log_level').lower()
        ))
        self.server.run()
        return 1 if self.failed else 0

    def on_thread_failure(self, event: ThreadEvent):
        # Exit non-zero so the process manager restarts the gateway
        self.failed = True
        if self.server is not None:
            self.server.should_exit = True

    def print_status(self, args) -> int:
        pool = build_pool(self.config)
        try:
            status = NetworkStatusUpdater(pool).refresh()
        finally:
            pool.close()

        if status is None:
            print("Error: storage is unavailable", file=sys.stderr)
            return 1
        print(status.model_dump_json(indent=2))
        return 0

def main():
    cli = CLI()
    sys.exit(cli.main(sys.argv[1:]))

if __name__ == "__main__":
    main()
