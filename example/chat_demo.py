from peerlink import DeliveryMode, new_client, new_server
from peerlink.transports.loopback import LoopbackNetwork


def main():
    # Server and two clients in one process over the loopback transport.
    # Swap transport="loopback" for "enet" (and run each side in its own process) for real UDP.
    net = LoopbackNetwork()
    server = new_server("localhost", 22122, max_channels=2, transport="loopback", network=net)
    server.logger.print_event_data = True

    def on_connect(data, session):
        session.send("welcome", {"id": session.local_id})

    def on_say(msg, session):
        # relay to everyone else, best effort on the chat channel
        server.set_send_mode(DeliveryMode.UNSEQUENCED)
        server.set_send_channel(1)
        server.broadcast("said", {"from": session.local_id, "text": msg["text"]}, exclude=session)

    server.on("connect", on_connect)
    server.on("say", on_say)
    server.set_schema("say", ["text"])

    clients = [new_client("localhost", 22122, max_channels=2, transport="loopback", network=net)
               for _ in range(2)]
    for i, client in enumerate(clients):
        client.on("welcome", lambda data, _s, i=i: print(f"client {i}: welcome, id {data['id']}"))
        client.on("said", lambda data, _s, i=i: print(f"client {i}: {data['from']} said {data['text']!r}"))
        client.connect()

    def pump():
        server.poll()
        for client in clients:
            client.poll()

    pump(); pump()
    clients[0].send("say", ["hello over loopback"])
    pump(); pump()

    for client in clients:
        client.disconnect()
    pump()
    print(f"server sent {server.packets_sent} packets, received {server.packets_received}, "
          f"{len(server.sessions)} sessions left")


if __name__ == "__main__":
    main()
