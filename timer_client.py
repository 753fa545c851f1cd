import argparse
import json
import logging
import time

import requests

logger = logging.getLogger(__name__)

HTTP_PORT = 9000


def request(method, url, **kwargs):
    logger.debug(f'{method} {url}')
    try:
        response = requests.request(method, url, timeout=1, **kwargs)
    except requests.exceptions.Timeout:
        return 408, None
    logger.debug(f'Return {response.status_code}: {response.text}')
    if response.headers.get('Content-Type', '').startswith('application/json'):
        return response.status_code, response.json()
    return response.status_code, response.text


def create(server, name, delay, repeat_count=0):
    params = {'name': name, 'delay': delay, 'repeat_count': repeat_count}
    return request('POST', f'http://{server}/timers', params=params)


def status(server, name):
    return request('GET', f'http://{server}/timers/{name}')


def update(server, name, delay=None, repeat_count=None):
    params = {}
    if delay is not None:
        params['delay'] = delay
    if repeat_count is not None:
        params['repeat_count'] = repeat_count
    return request('PUT', f'http://{server}/timers/{name}', params=params)


def command(server, name, cmd):
    return request('POST', f'http://{server}/timers/{name}/{cmd}')


def delete(server, name):
    return request('DELETE', f'http://{server}/timers/{name}')


def run_until_complete(server, name, poll_interval):
    """Start a timer and poll it until it stops on its own"""
    status_code, body = command(server, name, 'start')
    if status_code != 200:
        logger.error(f'Unexpected failure: start({name}), code={status_code}, body={body}')
        return None
    while body['running']:
        time.sleep(poll_interval)
        status_code, body = status(server, name)
        if status_code != 200:
            logger.error(f'Unexpected failure: status({name}), code={status_code}, body={body}')
            return None
        logger.info(f"{name}: {body['current_count']}/{body['repeat_count']}")
    return body


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('-s', '--server', default=f'127.0.0.1:{HTTP_PORT}')
    parser.add_argument('-n', '--name', default='demo')
    parser.add_argument('-d', '--delay', type=float, default=500)
    parser.add_argument('-r', '--repeat_count', type=int, default=5)
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args()

    assert args.repeat_count > 0, 'a repeat count of 0 would never complete'

    logging.basicConfig(
        format=u'[%(asctime)s %(filename)s:%(lineno)d %(levelname)s] %(message)s',
        level=logging.DEBUG if args.verbose else logging.INFO
    )

    status_code, body = create(args.server, args.name, args.delay, args.repeat_count)
    if status_code != 201:
        raise SystemExit(f'Could not create timer: {status_code} {body}')
    try:
        final = run_until_complete(args.server, args.name, args.delay / 1000 / 2)
        if final is not None:
            print(json.dumps(final, indent=2))
    finally:
        delete(args.server, args.name)
