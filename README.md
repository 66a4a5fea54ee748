# pulseox

Tools for a pulse oximeter built around a MAX30102 sensor that reports its
readings over an ESP8266 WiFi link to a desktop receiver. Everything is plain
Python with no third-party dependencies.

## What is in the package

Device side:

- `pulseox.buffers.CircularBuffer` – a bounded FIFO of bytes; pushing into a
  full buffer drops the new byte, popping an empty one raises `IndexError`.
- `pulseox.taskqueue.TaskQueue` – a fixed-capacity FIFO of `Task` objects
  (a function plus an integer); enqueueing into a full queue raises
  `QueueFullError`.
- `pulseox.timers` – `TickScheduler` calls the `callback` of every registered
  `TimedPeripheral` on each `tick()`; `Timer` counts ticks down, calls its
  handler on expiry and restarts itself when `reload` is true.
- `pulseox.serialport.SerialPort` – an in-memory UART model: `transmit` and
  `transmit_decimal` queue outgoing bytes that `drain()` returns; `feed`
  stores incoming bytes that `receive()` returns one at a time (or `None`).
- `pulseox.sensor.Max30102` – the MAX30102 register driver. It talks through
  a `RegisterBus`, an abstract class with `write(data)` and `read(count)`
  that you implement for your bus. Constructing the driver writes the
  configuration; `read_fifo_data` fills 100-sample red and infrared ring
  buffers.
- `pulseox.esp8266.Esp8266` – the AT-command state machine. Call
  `init_module()` repeatedly until `is_connected()`; it sends `AT`,
  `AT+CWMODE=3`, `AT+CWJAP=...` and `AT+CIPSTART=...`, advancing on each
  `OK\r\n` reply. `send(value)` queues an `AT+CIPSEND` header and the value's
  digits, which its timer sends every 500 ticks.
- `pulseox.monitor.Max30102StateMachine` – alternates between reading the
  FIFO pointers and the samples; after each full window it estimates heart
  rate and SpO2 and, every 60 valid values, sends a header (`0` for heart
  rate, `1` for SpO2) followed by their integer `average`.

Signal processing:

- `pulseox.spo2.heart_rate_and_oxygen_saturation(ir, red)` takes 100 infrared
  and 100 red samples (25 Hz, four seconds) and returns a `Reading` with
  `spo2`, `spo2_valid`, `heart_rate` and `heart_rate_valid`. Invalid values
  are reported as `-999`. The peak helpers `find_peaks`,
  `peaks_above_min_height`, `remove_close_peaks` and `sort_indices_descend`
  are public too.

Desktop side:

- `pulseox.measurements.MeasurementParser` decodes the header/value stream;
  `parse_chunk(data)` reads one received chunk as a decimal integer and feeds
  it. `format_record(patient, oxygen, heart_rate)` formats one history line.
- `pulseox.patients.Patient` and `patient_from_form(...)` build a patient
  record from form fields (surname upper-cased, a non-numeric DNI read as 0).
- `pulseox.history.History` keeps the measurement log in a text file with
  `load`, `save`, `append` and `clear`.
- `pulseox.receiver.MeasurementReceiver` is an asyncio TCP server that accepts
  the first client, decodes what it sends and calls `on_update(oxygen,
  heart_rate)` after each decoded chunk.

## Computing a reading

```python
from pulseox.spo2 import heart_rate_and_oxygen_saturation

reading = heart_rate_and_oxygen_saturation(ir_samples, red_samples)
if reading.heart_rate_valid:
    print("heart rate", reading.heart_rate)
if reading.spo2_valid:
    print("SpO2", reading.spo2)
```

## Receiving measurements

```
pulseox-receiver --host 0.0.0.0 --port 5000
```

Both options are optional (the defaults are shown). Each decoded update is
printed as the latest SpO2 and heart rate; stop it with Ctrl-C.

## What the package does not do

- It has no graphical windows: there is no measurement display, patient
  dialog or history editor. `History`, `patient_from_form` and
  `format_record` provide the storage and formatting such screens would use,
  and the receiver command only prints updates; it does not save them.
- It does not drive hardware. `SerialPort` is an in-memory model, and
  `Max30102` needs a `RegisterBus` implementation supplied by you.

## Installing and testing

```
pip install .
pip install .[test]
pytest
```

Python 3.10 or newer is required.