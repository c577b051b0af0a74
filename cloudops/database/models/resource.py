from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from ..database import Base
from .association import (
    resource_ecs_bind_nodes,
    resource_elb_bind_nodes,
    resource_rds_bind_nodes,
)

class ResourceTreeMixin:
    """
    ECS/ELB/RDS 리소스가 공통으로 가지는 컬럼입니다.
    hash는 생성 시점에 instance_name과 ip_addr로 계산되어 저장되는 지문(fingerprint)입니다.
    """
    id = Column(Integer, primary_key=True, index=True)
    instance_name = Column(String, nullable=False, index=True)
    instance_id = Column(String, nullable=False, default="")
    hash = Column(String(64), nullable=False, default="", index=True)
    vendor = Column(String, nullable=False, default="")
    region = Column(String, nullable=False, default="")
    zone_id = Column(String, nullable=False, default="")
    vpc_id = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="")
    env = Column(String, nullable=False, default="")
    ip_addr = Column(String, nullable=False, default="")
    description = Column(String, nullable=False, default="")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class ResourceEcs(ResourceTreeMixin, Base):
    """
    ECS(가상 머신 인스턴스) 리소스입니다.
    AWS의 'EC2 Instance', OpenStack의 'Server'에 해당합니다.
    """
    __tablename__ = "resource_ecs"
    os_type = Column(String, nullable=False, default="")
    os_name = Column(String, nullable=False, default="")
    image_id = Column(String, nullable=False, default="")
    hostname = Column(String, nullable=False, default="")
    cpu = Column(Integer, nullable=False, default=0)
    memory = Column(Integer, nullable=False, default=0)
    disk = Column(Integer, nullable=False, default=0)

    bind_nodes = relationship("TreeNode", secondary=resource_ecs_bind_nodes, back_populates="bind_ecs")


class ResourceElb(ResourceTreeMixin, Base):
    """ELB(로드 밸런서) 리소스입니다."""
    __tablename__ = "resource_elb"
    load_balancer_type = Column(String, nullable=False, default="")
    bandwidth_capacity = Column(Integer, nullable=False, default=0)
    address_type = Column(String, nullable=False, default="")
    dns_name = Column(String, nullable=False, default="")

    bind_nodes = relationship("TreeNode", secondary=resource_elb_bind_nodes, back_populates="bind_elb")


class ResourceRds(ResourceTreeMixin, Base):
    """RDS(관계형 데이터베이스) 리소스입니다."""
    __tablename__ = "resource_rds"
    engine = Column(String, nullable=False, default="")
    engine_version = Column(String, nullable=False, default="")
    db_instance_class = Column(String, nullable=False, default="")
    connection_string = Column(String, nullable=False, default="")

    bind_nodes = relationship("TreeNode", secondary=resource_rds_bind_nodes, back_populates="bind_rds")
