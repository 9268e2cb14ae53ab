"""
명령행 도구
===========

  lookup-kzg prove  [--accumulator sum|product] [--output FILE]
      고정된 예제 witness (F = [1, 2, 3, 4], T = [4, 1, 2, 3])의 증명을 JSON으로 출력한다.

  lookup-kzg verify <proof.json | JSON 문자열> [--bits N]
      증명을 검증한다. 종료 코드: 0 수락, 1 거부, 2 잘못된 입력.

SRS는 --ptau (또는 LOOKUP_KZG_PTAU) 파일을 읽거나, 없으면 --seed
(또는 LOOKUP_KZG_SEED) 에서 결정론적으로 생성한다.
"""

import argparse
import logging
import os
import sys

from lookup_kzg.config import ACCUMULATORS, SUM, load_settings
from lookup_kzg.errors import LookupArgumentError, InvalidInput, InvalidProofElement
from lookup_kzg.field import MAX_DOMAIN_BITS
from lookup_kzg.proof import Proof
from lookup_kzg.prover import prove
from lookup_kzg.srs import SRS
from lookup_kzg.verifier import verify

logger = logging.getLogger(__name__)

# 예제 witness: T는 F를 한 칸 회전한 것
SAMPLE_F = [1, 2, 3, 4]
SAMPLE_T = [4, 1, 2, 3]
SAMPLE_BITS = 2

EXIT_ACCEPT = 0
EXIT_REJECT = 1
EXIT_MALFORMED = 2


def build_parser(settings):
    parser = argparse.ArgumentParser(
        prog="lookup-kzg",
        description="Multiset equality / lookup argument over KZG (bn128)",
    )
    parser.add_argument("--ptau", default=settings["ptau"],
                        help="powers-of-tau file (default: $LOOKUP_KZG_PTAU)")
    parser.add_argument("--seed", type=int, default=settings["seed"],
                        help="seed for the deterministic SRS when no ptau file is given")
    parser.add_argument("--log-level", default=settings["log_level"],
                        help="logging level (default: $LOOKUP_KZG_LOG_LEVEL or WARNING)")

    sub = parser.add_subparsers(dest="command", required=True)

    prove_parser = sub.add_parser("prove", help="prove the sample witness and print the JSON proof")
    prove_parser.add_argument("--accumulator", choices=ACCUMULATORS, default=SUM)
    prove_parser.add_argument("--output", help="write the proof to this file instead of stdout")

    verify_parser = sub.add_parser("verify", help="verify a JSON proof")
    verify_parser.add_argument("proof", help="path to a proof file, or the proof JSON itself")
    verify_parser.add_argument("--bits", type=int, default=SAMPLE_BITS,
                               help="log2 of the domain size, 0..28 (default: %(default)s)")
    return parser


def load_srs(ptau, seed, power):
    if ptau:
        return SRS.from_ptau(ptau)
    return SRS.generate(power, seed=seed)


def cmd_prove(args):
    srs = load_srs(args.ptau, args.seed, SAMPLE_BITS)
    proof = prove(SAMPLE_F, SAMPLE_T, srs, accumulator=args.accumulator)
    text = proof.to_json(indent=2)
    if args.output:
        with open(args.output, "w") as f:
            f.write(text + "\n")
        logger.info("Proof written to %s", args.output)
    else:
        print(text)
    return EXIT_ACCEPT


def cmd_verify(args):
    if os.path.isfile(args.proof):
        with open(args.proof) as f:
            text = f.read()
    else:
        text = args.proof

    try:
        proof = Proof.from_json(text)
    except InvalidProofElement as e:
        logger.error("Malformed proof: %s", e)
        return EXIT_MALFORMED

    if not 0 <= args.bits <= MAX_DOMAIN_BITS:
        raise InvalidInput(f"--bits는 0 이상 {MAX_DOMAIN_BITS} 이하여야 합니다: {args.bits}")

    srs = load_srs(args.ptau, args.seed, args.bits)
    if verify(proof, args.bits, srs):
        print("Proof verified")
        return EXIT_ACCEPT
    print("Proof rejected")
    return EXIT_REJECT


def main(argv=None):
    try:
        settings = load_settings()
    except LookupArgumentError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_MALFORMED

    args = build_parser(settings).parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        if args.command == "prove":
            return cmd_prove(args)
        return cmd_verify(args)
    except LookupArgumentError as e:
        logger.error("%s", e)
        return EXIT_MALFORMED


if __name__ == "__main__":
    sys.exit(main())
