"""Local Stack Focus (LSF).

Sidecar agent for local docker-compose stacks that:
 - polls the docker engine for containers on one network
 - spots the "target" service and the containers labelled as its dependents
 - rewrites the dependents' /etc/hosts so a fixed list of hostnames
   resolves to the target's current IP

State lives in memory only and is rebuilt from the first poll after a restart.
"""
