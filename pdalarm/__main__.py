from __future__ import annotations
import argparse, logging, sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

RESET="\033[0m"; BOLD="\033[1m"; RED="\033[91m"; YELLOW="\033[93m"; GREEN="\033[92m"; CYAN="\033[96m"; GREY="\033[90m"

class ColourFormatter(logging.Formatter):
    _C = {logging.DEBUG: GREY, logging.INFO: CYAN, logging.WARNING: YELLOW, logging.ERROR: RED, logging.CRITICAL: RED+BOLD}
    def format(self, r):
        return f"{GREY}{datetime.now().strftime('%Y-%m-%d %H:%M:%S')}{RESET} {self._C.get(r.levelno,'')}{r.levelname:<8}{RESET} {r.getMessage()}"

def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for h in [h for h in root.handlers if getattr(h, "_pdalarm", False)]:
        root.removeHandler(h); h.close()
    ch = logging.StreamHandler(); ch.setFormatter(ColourFormatter()); ch._pdalarm = True; root.addHandler(ch)
    if log_file:
        fh = logging.FileHandler(log_file); fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(message)s"))
        fh._pdalarm = True; root.addHandler(fh)

SAMPLE_CONFIG = """\
log_level: INFO
log_file: ""

transport:
  url: "https://events.pagerduty.com/generic/2010-04-15/create_event.json"
  timeout: 10

callback:
  # 32 character integration key of the PagerDuty service
  service_key: "YOUR_32_CHARACTER_SERVICE_KEY___"
  use_custom_incident_key: true
  incident_key_prefix: "Graylog2/"
  client: "Graylog2"
  client_url: ""
"""

def build_callback(cfg):
    from pdalarm.callbacks import PagerDutyAlarmCallback
    from pdalarm.config import cfg_get, EVENTS_API_URL
    from pdalarm.transport import HttpTransport
    cb = PagerDutyAlarmCallback(HttpTransport(timeout=cfg_get(cfg, "transport", "timeout", default=10)),
                                url=cfg_get(cfg, "transport", "url", default=EVENTS_API_URL))
    cb.initialize(cfg.get("callback") or {})
    return cb

def print_fields(cb) -> None:
    print(f"\n{BOLD}{CYAN}{cb.name} - configuration{RESET}")
    for f in cb.requested_configuration():
        req = "" if f.optional else f" {RED}(required){RESET}"
        print(f"  {BOLD}{f.name:<24}{RESET} {f.field_type:<8} default={f.default_value!r}{req}")
        print(f"  {GREY}{'':<24} {f.human_name}: {f.description}{RESET}")
    print()

def run_validate(cb, raw, source: str) -> int:
    from pdalarm.config import collect_errors
    print(f"Validating: {source}")
    errors = collect_errors(raw)
    for key, value in cb.attributes().items():
        print(f"  {key:<24} {value!r}")
    for e in errors:
        print(f"  {RED}✗ {e.field}: {e.message}{RESET}")
    if errors:
        print(f"{RED}Config INVALID{RESET}"); return 1
    print(f"{GREEN}Config OK{RESET}"); return 0

def run_trigger(cb, args) -> int:
    from pdalarm.errors import ConfigurationError, TransportFailure
    from pdalarm.models import AlertCondition, CheckResult, Stream
    stream = Stream(id=args.stream_id, title=args.stream_title or args.stream_id)
    result = CheckResult(condition=AlertCondition(id=args.condition_id, description=args.description),
                         description=args.description, matched_count=args.matched)
    try:
        key = cb.call(stream, result)
    except ConfigurationError as e:
        print(f"{RED}Invalid configuration:{RESET} {e.message}"); return 1
    except TransportFailure as e:
        print(f"{RED}Trigger failed:{RESET} {e}"); return 1
    print(f"{GREEN}Trigger sent{RESET} incident_key={key}")
    return 0

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="pdalarm", description="pdalarm - PagerDuty alarm callback")
    parser.add_argument("--config",    "-c", metavar="PATH", help="Config file path")
    parser.add_argument("--init",            action="store_true", help="Write sample config and exit")
    parser.add_argument("--fields",          action="store_true", help="Print the requested configuration fields and exit")
    parser.add_argument("--validate",        action="store_true", help="Validate config and exit")
    parser.add_argument("--trigger",         action="store_true", help="Send a test trigger event and exit")
    parser.add_argument("--stream-id",       default="test-stream", help="Stream id for --trigger")
    parser.add_argument("--stream-title",    default=None,          help="Stream title for --trigger")
    parser.add_argument("--condition-id",    default="test-condition", help="Alert condition id for --trigger")
    parser.add_argument("--description",     default="Test alert triggered from pdalarm", help="Check result description for --trigger")
    parser.add_argument("--matched",         type=int, default=0,   help="Matched message count for --trigger")
    parser.add_argument("--log-level",       default=None,        help="DEBUG/INFO/WARNING/ERROR")
    parser.add_argument("--version", "-v",   action="store_true", help="Print version and exit")
    args = parser.parse_args(argv)

    if args.version:
        from pdalarm import __version__; print(f"pdalarm {__version__}"); return 0

    if args.init:
        target = Path(args.config or "pdalarm.yaml")
        if target.exists(): print(f"Config already exists: {target}")
        else: target.write_text(SAMPLE_CONFIG); print(f"{GREEN}Config written:{RESET} {target}")
        return 0

    from pdalarm.config import load_config
    cfg = load_config(args.config)
    setup_logging(args.log_level or cfg.get("log_level", "INFO"), cfg.get("log_file") or None)
    cb  = build_callback(cfg)

    if args.fields:
        print_fields(cb); return 0
    if args.validate:
        return run_validate(cb, cfg.get("callback") or {}, args.config or "auto")
    if args.trigger:
        return run_trigger(cb, args)
    parser.print_help()
    return 0

if __name__ == "__main__":
    sys.exit(main())
