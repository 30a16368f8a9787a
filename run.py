#!/usr/bin/env python3

import sys
import argparse

from azure.core.exceptions import ClientAuthenticationError
from azure.identity import AzureCliCredential
from kubernetes import client, config

from landlord.actions.evict import AzureEvicter
from landlord.common import *
from landlord.helpers import run
from landlord.landlord import Landlord
from landlord.log import configure, levels
from landlord.probes.node import KubeNodeLister
from landlord.rand import SeededRandom


# Command-line Argument Parsing
def str2bool(v):
    if isinstance(v, bool):
        return v
    if v.lower() in true_list:
        return True
    elif v.lower() in false_list:
        return False
    else:
        raise argparse.ArgumentTypeError(
            'Boolean value (yes, no, true, false, y, n, 1, or 0) expected.')


LOG_LEVEL_HELP = """Logging level.
                      [LOG-LEVEL]: debug, info, error
                      Default: {}""".format(DEFAULT_LANDLORD_LOG_LEVEL)


def log_level(v):
    if v.lower() in levels.keys():
        return v.lower()
    else:
        raise argparse.ArgumentTypeError(
            'Expected one of the following: {}.'.format(
                 ', '.join(levels.keys())))


def positive_float(v):
    try:
        value = float(v)
    except ValueError:
        raise argparse.ArgumentTypeError('{} is not a number'.format(v))
    if value <= 0:
        raise argparse.ArgumentTypeError('{} must be greater than 0'.format(v))
    return value


def non_negative_int(v):
    try:
        value = int(v)
    except ValueError:
        raise argparse.ArgumentTypeError('{} is not an integer'.format(v))
    if value < 0:
        raise argparse.ArgumentTypeError('{} must not be negative'.format(v))
    return value


def program_args():
    parser = argparse.ArgumentParser(
        description='Periodically simulate the eviction of random nodes in an' \
                    ' AKS cluster backed by Virtual Machine Scale Sets.')

    parser.add_argument('--interval', type=positive_float, help='Seconds ' \
                        'between sweeps. Each eviction is delayed by up to ' \
                        'this long and must complete within this long. ' \
                        'Default: {}'.format(DEFAULT_LANDLORD_INTERVAL),
                        default=DEFAULT_LANDLORD_INTERVAL)

    parser.add_argument('--min-evictions', type=non_negative_int, help='' \
                        'Minimum number of nodes to evict per sweep ' \
                        '(inclusive). Default: ' \
                        '{}'.format(DEFAULT_LANDLORD_MIN_EVICTIONS),
                        default=DEFAULT_LANDLORD_MIN_EVICTIONS)

    parser.add_argument('--max-evictions', type=non_negative_int, help='' \
                        'Maximum number of nodes to evict per sweep ' \
                        '(exclusive). Default: ' \
                        '{}'.format(DEFAULT_LANDLORD_MAX_EVICTIONS),
                        default=DEFAULT_LANDLORD_MAX_EVICTIONS)

    parser.add_argument('--kubeconfig', help='Path to the kubeconfig file. ' \
                        'Default: in-cluster configuration if available, ' \
                        'otherwise ~/.kube/config', default=None)

    parser.add_argument('--kube-context', help='The kubeconfig context to ' \
                        'use. Default: the current context', default=None)

    parser.add_argument('--seed', type=int, help='Seed for the random ' \
                        'source. Makes node selection reproducible. ' \
                        'Default: None', default=None)

    parser.add_argument('-l', '--log-level', type=log_level, nargs='?',
                        const=DEFAULT_LANDLORD_LOG_LEVEL,
                        default=DEFAULT_LANDLORD_LOG_LEVEL,
                        help=LOG_LEVEL_HELP)

    parser.add_argument('--log-json', type=str2bool, help='Log one JSON ' \
                        'object per line? Options (case insensitive): y, ' \
                        'yes, true, 1, n, no, false, 0. Default: Y', nargs='?',
                        const=True, default=DEFAULT_LANDLORD_LOG_JSON)

    parser.add_argument('--logfile', help='Also write logs to this file. ' \
                        'Default: None', default=None)

    return parser


def parse_args(argv=None, parser=program_args()):
    args = parser.parse_args(args=argv)
    if args.max_evictions <= args.min_evictions:
        parser.error('--max-evictions ({}) must be greater than ' \
                     '--min-evictions ({})'.format(args.max_evictions,
                                                   args.min_evictions))
    return args


def init(args):
    logger = configure(args.log_level, json=args.log_json,
                       logfile=args.logfile)
    logger.debug("Initializing...")
    logger.debug("args: %s", args)
    return logger


def get_node_lister(args, logger=None):
    if args.kubeconfig or args.kube_context:
        config.load_kube_config(config_file=args.kubeconfig,
                                context=args.kube_context)
    else:
        try:
            config.load_incluster_config()
        except config.ConfigException:
            config.load_kube_config()
    return KubeNodeLister(client.CoreV1Api(), logger=logger)


def get_evicter(logger=None):
    # Authenticate through the Azure CLI (az login). A token is requested up
    # front so that a missing or expired login fails at startup.
    credential = AzureCliCredential(
        process_timeout=DEFAULT_LANDLORD_AZURE_CLI_TIMEOUT)
    credential.get_token(DEFAULT_LANDLORD_AZURE_SCOPE)
    return AzureEvicter(credential, logger=logger)


def main(argv=None):
    args = parse_args(argv)
    logger = init(args)

    try:
        lister = get_node_lister(args, logger=logger)
    except config.ConfigException as e:
        print("could not build Kubernetes configuration: {}".format(e))
        return 1

    try:
        evicter = get_evicter(logger=logger)
    except ClientAuthenticationError as e:
        print("building Azure credentials: {}".format(e.message))
        return 1

    landlord = Landlord(lister, evicter, SeededRandom(args.seed),
                        logger=logger,
                        min_evictions=args.min_evictions,
                        max_evictions=args.max_evictions,
                        interval=args.interval)
    try:
        run(landlord.start)
    finally:
        # No eviction thread may still hold the client when it is closed.
        landlord.close()
        evicter.close()

    return 0


if __name__ == '__main__':
    sys.exit(main())
