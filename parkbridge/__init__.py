# ParkBridge: real-time parking occupancy bridge (RabbitMQ → WebSocket)
