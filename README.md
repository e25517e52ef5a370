# sockchat

Plain-socket chat tools for the terminal. They talk over TCP or UDP and use
port 8080 by default. Every command takes `--host` and `--port`; the servers
bind to the host given, the clients connect to it.

## Install

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Commands

### Relay chat

`sockchat-relay` runs a relay with a fixed number of client slots (two by
default, set with `--max-clients`; the listen backlog is set with
`--backlog`). It watches every connection at once with a selector. Each
message from a client is printed as `client_N: ...` and passed on to every
other connected client. A client that sends `logout`, or that closes its
connection, is dropped and its slot freed. A connection accepted while every
slot is taken stays open but is never read from. The default host is
`192.168.233.203`, so on most machines give your own address:

```
sockchat-relay --host 127.0.0.1
sockchat-relay-client --host 127.0.0.1
```

`sockchat-relay-client` only accepts a dotted IPv4 address as `--host`. Type
a line to send it; after each line the client waits for one message from the
relay and prints it as `Server: ...`. Typing `logout` ends the session, as
does the relay closing the connection.

### Duplex chat

`sockchat-duplex-server` waits for one client. `sockchat-duplex-client`
connects, reads a user name (the first word typed) and sends it first. After
that the two sides take turns: the client sends a line and the server
operator types the reply. The client leaves by typing `exitapp`. Names travel
in 32-byte fields and messages in 1024-byte fields, zero-padded.

```
sockchat-duplex-server
sockchat-duplex-client
```

### Echo chat

`sockchat-echo-server` accepts one client, prints each message it gets and
answers every one with `Response`. `sockchat-echo-client` sends the lines
you type (newline included) and prints each reply. Typing `exit` ends the
session on both sides.

```
sockchat-echo-server
sockchat-echo-client
```

### One-shot messages

`sockchat-oneshot` sends or receives a single message. Choose the mode with
a subcommand: `tcp-server`, `udp-server`, `tcp-client` or `udp-client`. The
clients take `--message` to replace their default text.

```
sockchat-oneshot tcp-server
sockchat-oneshot tcp-client --host 127.0.0.1 --message "hello"
sockchat-oneshot udp-server
sockchat-oneshot udp-client --host 127.0.0.1
```

Each server prints what it received and exits.

## Library use

- `sockchat.relay.ChatRelay(host, port, max_clients, backlog, out)`: the
  relay server, usable as a context manager, with `serve_forever()`,
  `shutdown()` (safe to call from another thread) and `close()`; its bound
  address is in `address`.
- `sockchat.relay_client.chat(sock, lines, out)` runs the relay client's
  send-and-receive loop on a connected socket; `run_client(host, port,
  stdin, stdout)` connects and runs it, returning an exit status.
- `sockchat.duplex.pack_field(text, size)` and `unpack_field(data)` encode
  and decode the fixed-size, zero-padded fields. `serve_duplex(listener,
  stdin, stdout)` serves one client on a listening socket and returns its
  user name; `run_duplex_client(host, port, stdin, stdout)` runs the client.
- `sockchat.echo.serve_echo(listener, out)` serves one client and returns
  the messages it received; `run_echo_client(host, port, stdin, stdout)`
  runs the client.
- `sockchat.oneshot.receive_tcp(listener)` and `receive_udp(sock)` return
  one message's bytes (up to 1024); `send_tcp(host, port, message)` and
  `send_udp(host, port, message)` send one and return the byte count.

## What it does not do

Messages are plain text with no framing beyond single reads (or fixed-size
fields in the duplex chat), no encryption and no authentication. The relay
keeps no history and the one-to-one servers handle a single client and then
exit.