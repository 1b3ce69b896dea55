from __future__ import annotations

import argparse
import json

from .auth.token import AuthTokenGenerator, verify_token
from .config import AuthConfig
from .crypto.ec_key import EC256PrivateKey
from .crypto.errors import AuthError


def _load_key(args: argparse.Namespace) -> EC256PrivateKey:
    if not args.key_file:
        raise SystemExit("missing --key-file (or ASC_PRIVATE_KEY_PATH)")
    return EC256PrivateKey.from_file(args.key_file)


def cmd_token(args: argparse.Namespace) -> int:
    if not (args.key_id and args.issuer_id):
        raise SystemExit("missing --key-id/--issuer-id (or ASC_KEY_ID/ASC_ISSUER_ID)")
    generator = AuthTokenGenerator(key=_load_key(args), key_id=args.key_id, issuer_id=args.issuer_id)
    print(generator.token_valid_for(args.ttl))
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    header, payload = verify_token(args.token, _load_key(args))
    print(json.dumps({"ok": True, "header": header.model_dump(), "payload": payload.model_dump()}))
    return 0


def main(argv: list[str] | None = None) -> int:
    cfg = AuthConfig.from_env()
    p = argparse.ArgumentParser("asc-auth")
    p.add_argument("--key-file", dest="key_file", default=cfg.private_key_path)
    sub = p.add_subparsers(dest="cmd", required=True)

    p_tok = sub.add_parser("token", help="print a signed bearer token")
    p_tok.add_argument("--key-id", dest="key_id", default=cfg.key_id)
    p_tok.add_argument("--issuer-id", dest="issuer_id", default=cfg.issuer_id)
    p_tok.add_argument("--ttl", type=int, default=cfg.token_ttl_sec)
    p_tok.set_defaults(func=cmd_token)

    p_ver = sub.add_parser("verify", help="check a token against the private key")
    p_ver.add_argument("token")
    p_ver.set_defaults(func=cmd_verify)

    args = p.parse_args(argv)
    try:
        return args.func(args)
    except AuthError as e:
        print(json.dumps({"ok": False, "error": type(e).__name__}))
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
