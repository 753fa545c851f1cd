import argparse
import logging

from aiohttp import web
import reptimer

logger = logging.getLogger('reptimer')

HTTP_PORT = 9000
COMMANDS = ('start', 'stop', 'reset', 'complete')


class TimerEntry:
    """A named timer plus the event counts seen by the server"""

    def __init__(self, name, delay, repeat_count):
        self.name = name
        self.ticks = 0
        self.completions = 0
        self.timer = reptimer.RepeatingTimer(delay, repeat_count)
        self.timer.add_event_listener(reptimer.Event.TICK, self.on_tick)
        self.timer.add_event_listener(reptimer.Event.COMPLETE, self.on_complete)

    def on_tick(self):
        self.ticks += 1
        logger.debug(f"{self.name}: tick {self.timer.current_count + 1}")

    def on_complete(self):
        self.completions += 1
        logger.info(f"{self.name}: complete")

    def status(self):
        return {
            'name': self.name,
            'delay': self.timer.get_delay(),
            'repeat_count': self.timer.get_repeat_count(),
            'current_count': self.timer.current_count,
            'running': self.timer.running,
            'ticks': self.ticks,
            'completions': self.completions,
        }


timers_key = web.AppKey('timers', dict)


def parse_number(query, key, convert, default=None):
    value = query.get(key)
    if value is None:
        if default is None:
            raise web.HTTPBadRequest(text=f"{key} is required")
        return default
    try:
        return convert(value)
    except ValueError:
        raise web.HTTPBadRequest(text=f"{key} must be a number") from None


def get_entry(request):
    name = request.match_info['name']
    try:
        return request.app[timers_key][name]
    except KeyError:
        logger.debug(f"Respond 404: {name} not found")
        raise web.HTTPNotFound(text="timer not found") from None


def setup_app():
    routes = web.RouteTableDef()

    @routes.get('/timers')
    async def list_timers(request: web.Request):
        timers = request.app[timers_key]
        return web.json_response([entry.status() for entry in timers.values()])

    @routes.post('/timers')
    async def create_timer(request: web.Request):
        query = request.url.query
        name = query.get('name')
        logger.debug(f"/timers?{query_string(query)}")
        if not name:
            logger.debug("Respond 400: name is required")
            return web.Response(status=400, text="name is required")
        timers = request.app[timers_key]
        if name in timers:
            logger.debug(f"Respond 409: {name} exists")
            return web.Response(status=409, text="timer exists")
        delay = parse_number(query, 'delay', float)
        repeat_count = parse_number(query, 'repeat_count', int, default=0)
        try:
            entry = TimerEntry(name, delay, repeat_count)
        except reptimer.InvalidArgument as e:
            logger.debug(f"Respond 400: {e}")
            return web.Response(status=400, text=str(e))
        timers[name] = entry
        logger.info(f"Created timer {name}: delay={delay}, repeat_count={repeat_count}")
        return web.json_response(entry.status(), status=201)

    @routes.get('/timers/{name}')
    async def get_timer(request: web.Request):
        return web.json_response(get_entry(request).status())

    @routes.put('/timers/{name}')
    async def update_timer(request: web.Request):
        entry = get_entry(request)
        query = request.url.query
        try:
            if 'delay' in query:
                entry.timer.set_delay(parse_number(query, 'delay', float))
            if 'repeat_count' in query:
                entry.timer.set_repeat_count(parse_number(query, 'repeat_count', int))
        except reptimer.InvalidArgument as e:
            logger.debug(f"Respond 400: {e}")
            return web.Response(status=400, text=str(e))
        return web.json_response(entry.status())

    @routes.post('/timers/{name}/{command}')
    async def run_command(request: web.Request):
        entry = get_entry(request)
        command = request.match_info['command']
        if command not in COMMANDS:
            logger.debug(f"Respond 404: unknown command {command}")
            return web.Response(status=404, text="unknown command")
        getattr(entry.timer, command)()
        logger.debug(f"{entry.name}: {command}")
        return web.json_response(entry.status())

    @routes.delete('/timers/{name}')
    async def delete_timer(request: web.Request):
        entry = get_entry(request)
        entry.timer.stop()
        del request.app[timers_key][entry.name]
        logger.info(f"Deleted timer {entry.name}")
        return web.Response(text="ok")

    async def stop_timers(app):
        for entry in app[timers_key].values():
            entry.timer.stop()

    app = web.Application()
    app[timers_key] = {}
    app.add_routes(routes)
    app.on_shutdown.append(stop_timers)
    return app


def query_string(query):
    return '&'.join(f'{key}={value}' for key, value in query.items())


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--host', default='127.0.0.1')
    parser.add_argument('-p', '--port', type=int, default=HTTP_PORT)
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(
        format=u'[%(asctime)s %(filename)s:%(lineno)d %(levelname)s]  %(message)s',
        level=logging.DEBUG if args.verbose else logging.INFO
    )

    web.run_app(setup_app(), host=args.host, port=args.port)
