# ruff: noqa
from .plugin import TaploPlugin, register_plugin
from .volt_host import HttpResponse, VoltHost
from .volt_launch import LaunchDescriptor
