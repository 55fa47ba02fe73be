#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Facade over the Azure automation management client.

## Overview

`AutomationClient` manages the runbooks, jobs, and schedules of a single
automation account, which is identified by its resource group and name when the
facade is created. Listing automation accounts is the only operation that does
not require one:

    client = AutomationClient.from_session(creds, sub_id, "ops-rg", "ops")
    job = client.start_runbook("Restart-AppPool", {"Pool": "web"})

Listings of runbooks, jobs, schedules, and job streams follow continuation
tokens via `azcmd.paging`. Jobs and job streams are filtered server-side with
OData `$filter` expressions. Names are matched client-side, ignoring case.

## Runbook Parameters

The parameters given when a runbook is started or registered with a schedule
are checked against those declared by the runbook before the request is sent.
Every mandatory parameter must be supplied and parameters the runbook does not
declare are rejected, both with a `ValueError`. Unless the caller supplied
it, the `JobStartedBy` parameter is added with the value `azcmd`.

## Schedules

A schedule runs once, every N days, or every N hours. The records returned for
schedules differ accordingly: all include the start and expiry times, daily
schedules include `day_interval`, and hourly schedules include
`hour_interval`. A schedule without an expiry time expires on
9999-12-31T23:59:59Z.
"""

import io
import json
import logging
import uuid
from datetime import datetime, timezone

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.mgmt.automation import AutomationClient as AutomationManagementClient
from azure.mgmt.automation.models import (
    JobCreateParameters,
    JobScheduleCreateParameters,
    RunbookAssociationProperty,
    RunbookCreateOrUpdateParameters,
    RunbookUpdateParameters,
    ScheduleAssociationProperty,
    ScheduleCreateOrUpdateParameters,
    ScheduleUpdateParameters,
)

from azcmd.clients import (
    ManagementClient,
    RunbookNotPublishedError,
    ScheduleExistsError,
    odata_literal,
    resource_group_of,
    value_of,
    wait,
)
from azcmd.paging import get_paginated_resources

LOG = logging.getLogger(__name__)

JOB_STARTED_BY = "JobStartedBy"
CLIENT_IDENTITY = "azcmd"

RUNBOOK_TYPES = (
    "PowerShell",
    "PowerShellWorkflow",
    "GraphPowerShell",
    "GraphPowerShellWorkflow",
    "Python2",
    "Python3",
    "Script",
)

JOB_STATUSES = (
    "New",
    "Activating",
    "Running",
    "Completed",
    "Failed",
    "Stopped",
    "Blocked",
    "Suspended",
    "Disconnected",
    "Suspending",
    "Stopping",
    "Resuming",
    "Removing",
)

STREAM_TYPES = ("Progress", "Output", "Warning", "Error", "Debug", "Verbose", "Any")

FREQUENCIES = ("OneTime", "Day", "Hour")

DEFAULT_EXPIRY = datetime(9999, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
"""Expiry time of schedules created without one."""


class AutomationClient(ManagementClient):
    """Facade over `azure.mgmt.automation.AutomationClient`.

    `resource_group` and `account` identify the automation account used by
    all operations except `list_automation_accounts`.
    """

    sdk_class = AutomationManagementClient

    def __init__(self, client, resource_group=None, account=None):
        super().__init__(client)
        self.resource_group = resource_group
        self.account = account

    @classmethod
    def from_session(cls, credential, subscription_id, resource_group=None, account=None):
        return cls(cls.sdk_class(credential, subscription_id), resource_group, account)

    def _scope(self):
        if not self.resource_group or not self.account:
            raise ValueError("An automation account and its resource group are required")
        return {
            "resource_group_name": self.resource_group,
            "automation_account_name": self.account,
        }

    def _list(self, list_method, predicate=None, **kwargs):
        return get_paginated_resources(list_method, predicate, **self._scope(), **kwargs)

    # Accounts

    def list_automation_accounts(self, resource_group=None):
        ops = self.client.automation_account
        if resource_group:
            accounts = get_paginated_resources(
                ops.list_by_resource_group, resource_group_name=resource_group
            )
        else:
            accounts = get_paginated_resources(ops.list)
        return [automation_account_record(a) for a in accounts]

    # Runbooks

    def filter_runbooks(self, name=None):
        """Returns the runbook called `name` or all of them.

        Raises `azure.core.exceptions.ResourceNotFoundError` if there is no
        runbook called `name`.
        """
        return [runbook_record(rb) for rb in self._filter_runbooks(name)]

    def _filter_runbooks(self, name=None):
        def predicate(rb):
            return not name or rb.name.lower() == name.lower()

        runbooks = self._list(self.client.runbook.list_by_automation_account, predicate)
        if name and not runbooks:
            raise ResourceNotFoundError(f"Runbook not found: {name}")
        return runbooks

    def _get_runbook(self, name):
        # Listings omit the declared parameters, so fetch the runbook itself
        # using its canonical name.
        runbook = self._filter_runbooks(name)[0]
        return self.client.runbook.get(runbook_name=runbook.name, **self._scope())

    def create_runbook(
        self,
        name,
        runbook_type="PowerShell",
        description=None,
        tags=None,
        content=None,
        log_verbose=None,
        log_progress=None,
    ):
        """Creates a runbook and returns it.

        If `content`, the text of the runbook, is provided, it is uploaded as
        the draft of the runbook. Raises
        `azure.core.exceptions.ResourceExistsError` if the runbook exists.
        """
        scope = self._scope()
        existing = self._list(
            self.client.runbook.list_by_automation_account,
            lambda rb: rb.name.lower() == name.lower(),
        )
        if existing:
            raise ResourceExistsError(f"A runbook called '{name}' already exists")

        account = self.client.automation_account.get(**scope)
        parameters = RunbookCreateOrUpdateParameters(
            name=name,
            location=account.location,
            runbook_type=runbook_type,
            description=description,
            tags=tags,
            log_verbose=log_verbose,
            log_progress=log_progress,
        )
        LOG.info("creating runbook %s in %s", name, self.account)
        runbook = self.client.runbook.create_or_update(
            runbook_name=name, parameters=parameters, **scope
        )

        if content is not None:
            self.set_runbook_content(name, content)
        return runbook_record(runbook)

    def update_runbook(
        self, name, description=None, tags=None, log_verbose=None, log_progress=None
    ):
        """Updates the description, tags, or log settings of a runbook."""
        runbook = self._filter_runbooks(name)[0]
        parameters = RunbookUpdateParameters(
            description=description,
            tags=tags,
            log_verbose=log_verbose,
            log_progress=log_progress,
        )
        runbook = self.client.runbook.update(
            runbook_name=runbook.name, parameters=parameters, **self._scope()
        )
        return runbook_record(runbook)

    def set_runbook_content(self, name, content):
        """Replaces the draft content of a runbook with `content`."""
        LOG.info("replacing draft content of runbook %s", name)
        wait(
            self.client.runbook_draft.begin_replace_content(
                runbook_name=name,
                runbook_content=io.BytesIO(content.encode("utf-8")),
                **self._scope(),
            ),
            f"upload of runbook {name}",
        )

    def publish_runbook(self, name):
        """Publishes the draft of a runbook and returns the runbook."""
        runbook = self._filter_runbooks(name)[0]
        wait(
            self.client.runbook.begin_publish(runbook_name=runbook.name, **self._scope()),
            f"publication of runbook {runbook.name}",
        )
        return runbook_record(
            self.client.runbook.get(runbook_name=runbook.name, **self._scope())
        )

    def delete_runbook(self, name):
        runbook = self._filter_runbooks(name)[0]
        LOG.info("deleting runbook %s", runbook.name)
        self.client.runbook.delete(runbook_name=runbook.name, **self._scope())

    def process_runbook_parameters(self, name, parameters=None):
        """Returns the job parameters for starting the runbook called `name`.

        Raises `ValueError` if a mandatory parameter is missing or a parameter
        is not declared by the runbook, and `azcmd.clients.RunbookNotPublishedError`
        if the runbook has never been published.
        """
        runbook = self._get_runbook(name)
        if value_of(runbook.state) == "New":
            raise RunbookNotPublishedError(runbook.name)

        given = {k.lower(): (k, v) for k, v in (parameters or {}).items()}
        result = {}

        for pname, declared in (runbook.parameters or {}).items():
            if pname.lower() in given:
                value = given[pname.lower()][1]
                result[pname] = value if isinstance(value, str) else json.dumps(value)
            elif declared.is_mandatory:
                raise ValueError(
                    f"Value for mandatory runbook parameter '{pname}' is required"
                )

        if len(result) != len(given):
            declared = {p.lower() for p in result}
            unknown = sorted(k for lk, (k, _) in given.items() if lk not in declared)
            raise ValueError(f"Invalid runbook parameters: {', '.join(unknown)}")

        if JOB_STARTED_BY not in result:
            result[JOB_STARTED_BY] = CLIENT_IDENTITY
        return result

    # Jobs

    def start_runbook(self, name, parameters=None, run_on=None):
        """Starts a job for a published runbook and returns the job.

        `run_on` is the name of a hybrid worker group.
        """
        job_parameters = self.process_runbook_parameters(name, parameters)
        job_name = str(uuid.uuid4())

        LOG.info("starting runbook %s as job %s", name, job_name)
        job = self.client.job.create(
            job_name=job_name,
            parameters=JobCreateParameters(
                runbook=RunbookAssociationProperty(name=name),
                parameters=job_parameters,
                run_on=run_on,
            ),
            **self._scope(),
        )
        return job_record(job)

    def filter_jobs(self, runbook=None, status=None, start_time=None, end_time=None):
        """Returns the jobs of the account matching the criteria.

        `start_time` and `end_time` are timezone-aware datetimes that bound the
        start and end times of the jobs.
        """
        clauses = []
        if runbook:
            clauses.append(f"properties/runbook/name eq {odata_literal(runbook)}")
        if status:
            clauses.append(f"properties/status eq {odata_literal(status)}")
        if start_time:
            clauses.append(f"properties/startTime ge {_odata_time(start_time)}")
        if end_time:
            clauses.append(f"properties/endTime le {_odata_time(end_time)}")

        kwargs = {"filter": " and ".join(clauses)} if clauses else {}
        jobs = self._list(self.client.job.list_by_automation_account, **kwargs)
        return [job_record(j) for j in jobs]

    def get_job(self, job_id):
        return job_record(self.client.job.get(job_name=str(job_id), **self._scope()))

    def stop_job(self, job_id):
        LOG.info("stopping job %s", job_id)
        self.client.job.stop(job_name=str(job_id), **self._scope())

    def suspend_job(self, job_id):
        LOG.info("suspending job %s", job_id)
        self.client.job.suspend(job_name=str(job_id), **self._scope())

    def resume_job(self, job_id):
        LOG.info("resuming job %s", job_id)
        self.client.job.resume(job_name=str(job_id), **self._scope())

    def get_job_output(self, job_id):
        """Returns the output of a job as text."""
        output = self.client.job.get_output(job_name=str(job_id), **self._scope())
        if isinstance(output, bytes):
            return output.decode("utf-8")
        if isinstance(output, str):
            return output
        # Streamed responses yield chunks of bytes.
        return b"".join(output).decode("utf-8")

    def get_job_streams(self, job_id, stream_type=None, since=None):
        """Returns the stream records written by a job.

        `stream_type` is one of `STREAM_TYPES` and `since` is a timezone-aware
        datetime before which records are omitted.
        """
        clauses = []
        if stream_type and stream_type != "Any":
            clauses.append(f"properties/streamType eq {odata_literal(stream_type)}")
        if since:
            clauses.append(f"properties/time ge {_odata_time(since)}")

        kwargs = {"filter": " and ".join(clauses)} if clauses else {}
        streams = self._list(
            self.client.job_stream.list_by_job, job_name=str(job_id), **kwargs
        )
        return [job_stream_record(s) for s in streams]

    # Schedules

    def filter_schedules(self, name=None):
        """Returns the schedule called `name` or all of them."""
        if name:
            return [schedule_record(self._get_schedule(name))]
        schedules = self._list(self.client.schedule.list_by_automation_account)
        return [schedule_record(s) for s in schedules]

    def _get_schedule(self, name):
        return self.client.schedule.get(schedule_name=name, **self._scope())

    def create_schedule(
        self,
        name,
        start_time,
        expiry_time=None,
        frequency="OneTime",
        interval=1,
        description=None,
        time_zone=None,
    ):
        """Creates a schedule and returns it.

        `frequency` is one of `FREQUENCIES`. `interval` is the number of days
        or hours between runs and is ignored for one-time schedules. Raises
        `azcmd.clients.ScheduleExistsError` if the name is taken.
        """
        if frequency not in FREQUENCIES:
            raise ValueError(f"Frequency must be one of {', '.join(FREQUENCIES)}")
        if interval is None or interval < 1:
            raise ValueError("Interval must be a positive number")

        try:
            self._get_schedule(name)
        except ResourceNotFoundError:
            pass
        else:
            raise ScheduleExistsError(name)

        parameters = ScheduleCreateOrUpdateParameters(
            name=name,
            start_time=start_time,
            expiry_time=expiry_time or DEFAULT_EXPIRY,
            frequency=frequency,
            interval=None if frequency == "OneTime" else interval,
            description=description,
            time_zone=time_zone,
        )
        LOG.info("creating %s schedule %s", frequency, name)
        schedule = self.client.schedule.create_or_update(
            schedule_name=name, parameters=parameters, **self._scope()
        )
        return schedule_record(schedule)

    def update_schedule(self, name, is_enabled=None, description=None):
        """Enables, disables, or changes the description of a schedule."""
        parameters = ScheduleUpdateParameters(
            name=name, is_enabled=is_enabled, description=description
        )
        schedule = self.client.schedule.update(
            schedule_name=name, parameters=parameters, **self._scope()
        )
        return schedule_record(schedule)

    def delete_schedule(self, name):
        LOG.info("deleting schedule %s", name)
        self.client.schedule.delete(schedule_name=name, **self._scope())

    # Scheduled runbooks

    def register_scheduled_runbook(self, runbook, schedule, parameters=None):
        """Associates a runbook with a schedule and returns the association."""
        job_parameters = self.process_runbook_parameters(runbook, parameters)
        schedule_name = self._get_schedule(schedule).name

        job_schedule_id = str(uuid.uuid4())
        LOG.info("registering runbook %s with schedule %s", runbook, schedule_name)
        js = self.client.job_schedule.create(
            job_schedule_id=job_schedule_id,
            parameters=JobScheduleCreateParameters(
                schedule=ScheduleAssociationProperty(name=schedule_name),
                runbook=RunbookAssociationProperty(name=runbook),
                parameters=job_parameters,
            ),
            **self._scope(),
        )
        return job_schedule_record(js)

    def unregister_scheduled_runbook(self, runbook, schedule):
        """Removes the associations between a runbook and a schedule.

        Returns the associations removed. Raises
        `azure.core.exceptions.ResourceNotFoundError` if there are none.
        """
        matches = self.list_scheduled_runbooks(runbook, schedule)
        if not matches:
            raise ResourceNotFoundError(
                f"Runbook '{runbook}' is not registered with schedule '{schedule}'"
            )

        for js in matches:
            LOG.info("deleting job schedule %s", js["job_schedule_id"])
            self.client.job_schedule.delete(
                job_schedule_id=js["job_schedule_id"], **self._scope()
            )
        return matches

    def list_scheduled_runbooks(self, runbook=None, schedule=None):
        """Returns the associations between runbooks and schedules."""

        def predicate(js):
            if runbook and (js.runbook.name or "").lower() != runbook.lower():
                return False
            if schedule and (js.schedule.name or "").lower() != schedule.lower():
                return False
            return True

        job_schedules = self._list(
            self.client.job_schedule.list_by_automation_account, predicate
        )
        return [job_schedule_record(js) for js in job_schedules]


def _odata_time(dt):
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def automation_account_record(a):
    return {
        "name": a.name,
        "resource_group": resource_group_of(a.id),
        "location": a.location,
        "state": value_of(a.state),
        "sku": value_of(a.sku.name) if a.sku else None,
        "creation_time": a.creation_time,
        "tags": a.tags or {},
    }


def runbook_record(rb):
    parameters = rb.parameters or {}
    return {
        "name": rb.name,
        "runbook_type": value_of(rb.runbook_type),
        "state": value_of(rb.state),
        "description": rb.description,
        "log_verbose": rb.log_verbose,
        "log_progress": rb.log_progress,
        "parameters": sorted(parameters),
        "creation_time": rb.creation_time,
        "last_modified_time": rb.last_modified_time,
        "tags": rb.tags or {},
    }


def job_record(j):
    runbook = getattr(j, "runbook", None)
    return {
        "job_id": j.job_id,
        "runbook": runbook.name if runbook else None,
        "status": value_of(j.status),
        "creation_time": j.creation_time,
        "start_time": j.start_time,
        "end_time": j.end_time,
        "started_by": getattr(j, "started_by", None),
        "run_on": getattr(j, "run_on", None),
        "exception": getattr(j, "exception", None),
    }


def job_stream_record(s):
    return {
        "time": s.time,
        "stream_type": value_of(s.stream_type),
        "summary": s.summary,
        "stream_text": getattr(s, "stream_text", None),
    }


def schedule_record(s):
    frequency = value_of(s.frequency)
    record = {
        "name": s.name,
        "description": s.description,
        "is_enabled": s.is_enabled,
        "frequency": frequency,
        "start_time": s.start_time,
        "expiry_time": s.expiry_time,
        "next_run": s.next_run,
    }
    if frequency == "Day":
        record["day_interval"] = s.interval
    elif frequency == "Hour":
        record["hour_interval"] = s.interval
    return record


def job_schedule_record(js):
    return {
        "job_schedule_id": js.job_schedule_id,
        "runbook": js.runbook.name if js.runbook else None,
        "schedule": js.schedule.name if js.schedule else None,
        "parameters": js.parameters or {},
    }
