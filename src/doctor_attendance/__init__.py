"""Doctor Attendance package.

Feature modules (geofence, attendance, users) each keep a pure domain layer,
a service layer and a thin Flask controller; persistence sits behind
repository protocols with MySQL implementations.
"""
